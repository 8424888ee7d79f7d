"""
Flagtrace Demo - export a batch of flag evaluations as one trace

Each evaluation becomes a child span of a single batch span. The YAML file
next to this script prints the spans to the console and forwards them to an
OpenTelemetry collector.

Run:
    cd examples/flagtrace_demo
    DEPLOYMENT_ENVIRONMENT=dev OTEL_COLLECTOR_ENDPOINT=localhost:4317 python main.py

Without a collector the OTLP processor logs export failures and the console
output is unaffected.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

import flagtrace
from flagtrace import FeatureEvent


@dataclass
class Banner:
    title: str = "Autumn sale"
    color: str = "orange"
    discount: float = 0.15
    regions: list[str] = field(default_factory=lambda: ["eu", "us"])
    _internal_id: str = "b-1029"


def build_events() -> list[FeatureEvent]:
    now = int(time.time())
    return [
        FeatureEvent(
            context_kind="user",
            user_key="user-42",
            creation_date=now,
            key="new-checkout",
            variation="enabled",
            value=True,
            version="7",
        ),
        FeatureEvent(
            context_kind="anonymousUser",
            user_key="anon-7f3c",
            creation_date=now,
            key="banner-content",
            variation="autumn",
            value=Banner(),
            default=True,
            version="2",
        ),
        FeatureEvent(
            kind="feature",
            user_key="user-42",
            creation_date=now,
            key="checkout-v2",
            variation="on",
            value="on",
            version="1",
            source_flag_key="new-checkout",
            target_flag_key="checkout-v2",
        ),
    ]


def main() -> None:
    exporter = flagtrace.create_exporter(Path(__file__).parent / "flagtrace.yaml")
    try:
        exporter.export(build_events())
        exporter.force_flush()
    finally:
        exporter.shutdown()


if __name__ == "__main__":
    main()
