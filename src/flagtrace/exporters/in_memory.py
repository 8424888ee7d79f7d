"""In-memory span exporter for tests and debugging."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    SimpleSpanProcessor,
    SpanExporter,
    SpanExportResult,
)

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor

    from flagtrace.api.types import ProcessorConfig


class PersistentInMemoryExporter(SpanExporter):
    """Collect exported spans in memory.

    Unlike the SDK's ``InMemorySpanExporter``, spans survive ``shutdown()``
    and further exports are still accepted, so spans can be inspected after
    the exporter that fed them has been shut down. Call ``reset()`` to drop
    them.

    Example:
        >>> from opentelemetry.sdk.trace.export import BatchSpanProcessor
        >>> memory = PersistentInMemoryExporter()
        >>> exporter = new_exporter(with_batch_span_processors(BatchSpanProcessor(memory)))
    """

    def __init__(self) -> None:
        self._spans: list[ReadableSpan] = []
        self._lock = threading.Lock()

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Store spans."""
        with self._lock:
            self._spans.extend(spans)
        return SpanExportResult.SUCCESS

    def get_spans(self) -> tuple[ReadableSpan, ...]:
        """Return every span exported so far."""
        with self._lock:
            return tuple(self._spans)

    def reset(self) -> None:
        """Drop all stored spans."""
        with self._lock:
            self._spans.clear()

    def shutdown(self) -> None:
        """Shutdown exporter. Stored spans are kept."""

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush."""
        return True


# Sinks built from configuration, keyed by ProcessorConfig.name
_registry: dict[str, PersistentInMemoryExporter] = {}
_registry_lock = threading.Lock()


def get_in_memory_exporter(name: str = "default") -> PersistentInMemoryExporter:
    """Return the named in-memory sink, creating it on first use.

    Exporters built with ``create_exporter()`` from an ``in_memory`` entry
    feed the sink registered under that entry's ``name``:

        exporter = create_exporter(config)
        exporter.export(events)
        exporter.force_flush()
        spans = get_in_memory_exporter().get_spans()
    """
    with _registry_lock:
        exporter = _registry.get(name)
        if exporter is None:
            exporter = _registry[name] = PersistentInMemoryExporter()
        return exporter


def create_in_memory_processor(config: ProcessorConfig) -> SpanProcessor:
    """Create a processor feeding the in-memory sink named by the entry."""
    processor_cls = BatchSpanProcessor if config.batch else SimpleSpanProcessor
    return processor_cls(get_in_memory_exporter(config.name))
