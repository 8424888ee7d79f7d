"""Console span processor for debugging and development.

Prints spans to stdout for quick verification.
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING

from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import SpanProcessor

    from flagtrace.api.types import ProcessorConfig


def stdout_batch_span_processor(out: IO[str] | None = None) -> BatchSpanProcessor:
    """Create a batch span processor that writes spans as JSON to ``out``.

    Args:
        out: Text stream to write to (default: the current sys.stdout).

    Returns:
        BatchSpanProcessor wrapping a ConsoleSpanExporter.
    """
    return BatchSpanProcessor(ConsoleSpanExporter(out=out if out is not None else sys.stdout))


def create_stdout_processor(config: ProcessorConfig) -> SpanProcessor:
    """Create the stdout processor for a processor entry."""
    if config.batch:
        return stdout_batch_span_processor()
    return SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stdout))
