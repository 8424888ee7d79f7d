#!/usr/bin/env python3
"""Send a test batch of flag evaluations to a local OpenTelemetry collector."""

import sys

from flagtrace import FeatureEvent, new_exporter, with_batch_span_processors
from flagtrace.exceptions import ConfigurationError
from flagtrace.exporters import otel_collector_batch_span_processor, stdout_batch_span_processor

endpoint = sys.argv[1] if len(sys.argv) > 1 else "localhost:4317"

print(f"Configuring flagtrace with collector at {endpoint}...")
try:
    exporter = new_exporter(
        with_batch_span_processors(
            otel_collector_batch_span_processor(endpoint, insecure=True),
            stdout_batch_span_processor(),
        )
    )
except ConfigurationError as e:
    print(f"Configuration failed: {e}")
    sys.exit(1)

events = [
    FeatureEvent(user_key="test-user", key="test-flag", variation="on", value=True),
    FeatureEvent(user_key="test-user", key="test-flag", variation="off", value=False),
    FeatureEvent(
        user_key="test-user",
        key="test-config",
        variation="default",
        value={"limit": 10, "tiers": ["free", "pro"]},
    ),
]

print(f"\nExporting {len(events)} events...")
exporter.export(events)

print("\nFlushing spans...")
flushed = exporter.force_flush()
exporter.shutdown()

print("\n" + "=" * 50)
print("Test complete!" if flushed else "Flush did not complete, is the collector running?")
print("=" * 50)
sys.exit(0 if flushed else 1)
