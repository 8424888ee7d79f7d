"""Span exporters and processors the flagtrace exporter can ship spans through.

Collector exporters import their OTLP transport lazily, so the in-memory and
stdout sinks work without loading gRPC.
"""

from flagtrace.exporters.in_memory import PersistentInMemoryExporter, get_in_memory_exporter
from flagtrace.exporters.otlp import otel_collector_batch_span_processor, otel_exporter
from flagtrace.exporters.stdout import stdout_batch_span_processor

__all__ = [
    "PersistentInMemoryExporter",
    "get_in_memory_exporter",
    "otel_collector_batch_span_processor",
    "otel_exporter",
    "stdout_batch_span_processor",
]
