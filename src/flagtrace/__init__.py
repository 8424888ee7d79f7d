"""flagtrace: export feature flag evaluation events as OpenTelemetry traces.

    import flagtrace
    from flagtrace.exporters import stdout_batch_span_processor

    exporter = flagtrace.new_exporter(
        flagtrace.with_batch_span_processors(stdout_batch_span_processor()),
    )
    exporter.export([flagtrace.FeatureEvent(key="my-flag", value=True)])
    exporter.shutdown()
"""

from __future__ import annotations

from flagtrace.api import (
    Config,
    FeatureEvent,
    ProcessorConfig,
    ResourceConfig,
    ValidationConfig,
    create_exporter,
)
from flagtrace.exceptions import ConfigurationError, ExportError
from flagtrace.exporter import (
    Exporter,
    default_resource,
    new_exporter,
    with_batch_span_processors,
    with_resource,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "ExportError",
    "Exporter",
    "FeatureEvent",
    "ProcessorConfig",
    "ResourceConfig",
    "ValidationConfig",
    "__version__",
    "create_exporter",
    "default_resource",
    "new_exporter",
    "with_batch_span_processors",
    "with_resource",
]
