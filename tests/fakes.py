"""Test fakes and sample payloads.

This module provides typed test doubles (fakes) that validate usage and
document expected API surfaces. Prefer these over MagicMock for better
type safety and self-documenting tests.

Following the testing philosophy:
- Fakes are working implementations with shortcuts
- They validate usage patterns (unlike MagicMock which accepts anything)
- They catch typos and API drift at test time
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from opentelemetry.sdk.trace import SpanProcessor

from flagtrace.api.types import FeatureEvent

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.sdk.trace import ReadableSpan, Span


class RecordingSpanProcessor(SpanProcessor):
    """SpanProcessor that records every call it receives.

    Unlike MagicMock, this fake:
    - Has explicit method signatures that match the SDK interface
    - Keeps the ended spans for inspection
    - Returns a configurable force_flush() result

    Usage:
        recorder = RecordingSpanProcessor(flush_result=False)
        exporter = new_exporter(with_batch_span_processors(recorder))
        assert exporter.force_flush() is False
    """

    def __init__(self, flush_result: bool = True) -> None:
        self.flush_result = flush_result
        self.started: list[Span] = []
        self.ended: list[ReadableSpan] = []
        self.flush_calls = 0
        self.shutdown_calls = 0

    def on_start(
        self,
        span: Span,
        parent_context: Context | None = None,
    ) -> None:
        self.started.append(span)

    def on_end(self, span: ReadableSpan) -> None:
        self.ended.append(span)

    def shutdown(self) -> None:
        self.shutdown_calls += 1

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        self.flush_calls += 1
        return self.flush_result

    def span_names(self) -> list[str]:
        """Return the names of all ended spans, in end order."""
        return [span.name for span in self.ended]


@dataclass
class SubStruct:
    """Nested payload: five public scalars and one private field."""

    sub_content: str = "world"
    sub_timestamp: int = 0
    sub_condition: bool = False
    sub_value: float = 3.0
    sub_another_value: float = 44.4
    _sub_not_exported: bool = True


@dataclass
class SampleStruct:
    """Top-level payload: a nested struct, five public scalars, one private field."""

    substruct: SubStruct = field(default_factory=SubStruct)
    content: str = "hello"
    timestamp: int = 192929922
    condition: bool = True
    value: float = 1.0
    another_value: float = 3.3
    _not_exported: bool = False


@dataclass
class SmallSubStruct:
    """Nested payload with three public scalars and one private field."""

    name: str = "inner"
    count: int = 2
    enabled: bool = True
    _hidden: str = "secret"


@dataclass
class SmallStruct:
    """Two-level payload with three public scalars at each level and two private fields."""

    label: str = "outer"
    ratio: float = 0.5
    active: bool = False
    nested: SmallSubStruct = field(default_factory=SmallSubStruct)
    _internal: int = 7


def build_feature_events() -> list[FeatureEvent]:
    """Return three events: two with a string value, one with a nested struct."""
    return [
        FeatureEvent(
            kind="feature",
            context_kind="anonymousUser",
            user_key="ABCD",
            creation_date=1617970547,
            key="random-key",
            variation="Default",
            value="YO",
            default=False,
        ),
        FeatureEvent(
            kind="feature",
            context_kind="anonymousUser",
            user_key="ABCDEF",
            creation_date=1617970547,
            key="random-key",
            variation="Default",
            value="YO",
            default=False,
        ),
        FeatureEvent(
            kind="feature",
            context_kind="anonymousUser",
            user_key="ABCDEF",
            creation_date=1617970547,
            key="random-key",
            variation="Default",
            value=SampleStruct(),
            default=False,
        ),
    ]
