"""Pipeline composition: processor dispatch + exporter options.

This module is responsible for:
- Dispatching each configured processor to the factory for its type
- Turning a Config into the ordered option list for new_exporter()
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from opentelemetry.sdk.resources import Resource

from flagtrace._internal.logging import log_internal_error
from flagtrace.exceptions import ConfigurationError
from flagtrace.exporter import with_batch_span_processors, with_resource

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import SpanProcessor

    from flagtrace.api.types import Config, ProcessorConfig
    from flagtrace.exporter import ExporterOption

logger = logging.getLogger(__name__)

# Registry of processor factories: type -> (module_path, factory_function_name)
PROCESSOR_FACTORIES: dict[str, tuple[str, str]] = {
    "otlp": ("flagtrace.exporters.otlp", "create_otlp_processor"),
    "stdout": ("flagtrace.exporters.stdout", "create_stdout_processor"),
    "in_memory": ("flagtrace.exporters.in_memory", "create_in_memory_processor"),
}


def create_processor(config: ProcessorConfig) -> SpanProcessor:
    """Create the span processor for one processor entry.

    Args:
        config: Processor entry with its type set.

    Returns:
        Configured SpanProcessor.

    Raises:
        ConfigurationError: If the type is unknown or the factory rejects
            the entry.
    """
    if config.type not in PROCESSOR_FACTORIES:
        raise ConfigurationError(
            f"Unknown processor type: {config.type}. "
            f"Valid types: {', '.join(sorted(PROCESSOR_FACTORIES.keys()))}"
        )

    module_path, factory_name = PROCESSOR_FACTORIES[config.type]
    module = importlib.import_module(module_path)
    factory = getattr(module, factory_name)

    processor: SpanProcessor = factory(config)
    logger.debug("Created %s span processor", config.type)
    return processor


def create_processors(config: Config) -> list[SpanProcessor]:
    """Create every configured processor, in order.

    In permissive mode a processor that cannot be built is logged and
    skipped; in strict mode the error propagates.
    """
    processors: list[SpanProcessor] = []
    for entry in config.processors:
        try:
            processors.append(create_processor(entry))
        except ConfigurationError as e:
            if config.is_strict:
                raise
            log_internal_error(f"creating '{entry.type}' processor", e)
    return processors


def build_options(config: Config) -> list[ExporterOption]:
    """Translate a Config into new_exporter() options.

    Raises:
        ConfigurationError: In strict mode, if a processor cannot be built.
    """
    options: list[ExporterOption] = []
    if config.resource.attributes:
        options.append(
            with_resource(
                Resource(config.resource.attributes, schema_url=config.resource.schema_url)
            )
        )
    options.append(with_batch_span_processors(*create_processors(config)))
    return options
