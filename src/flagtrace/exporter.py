"""Feature event exporter: turns flag evaluation events into trace spans.

Every ``export()`` call opens one parent span and one child span per event,
so a batch of evaluations lands in a single trace. The spans are shipped by
the span processors registered at construction:

    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    from flagtrace import new_exporter, with_batch_span_processors
    from flagtrace.exporters import otel_collector_batch_span_processor

    exporter = new_exporter(
        with_batch_span_processors(
            otel_collector_batch_span_processor("localhost:4317", insecure=True)
        ),
    )
    exporter.export(events)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider

from flagtrace._internal.events import (
    INSTRUMENTATION_NAME,
    feature_event_to_attributes,
    span_name_for,
)
from flagtrace.exceptions import ConfigurationError, ExportError

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.sdk.trace import SpanProcessor

    from flagtrace.api.types import FeatureEvent

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "flagtrace"
SCHEMA_URL = "https://opentelemetry.io/schemas/1.17.0"

ExporterOption = Callable[["Exporter"], None]


def default_resource() -> Resource:
    """Return the exporter's identifying resource: service name and version."""
    from flagtrace import __version__

    return Resource(
        {SERVICE_NAME: DEFAULT_SERVICE_NAME, SERVICE_VERSION: __version__},
        schema_url=SCHEMA_URL,
    )


def merge_resource(base: Resource, addition: Resource) -> Resource:
    """Merge ``addition`` into ``base``; ``base`` wins on conflicting keys.

    The SDK refuses to merge resources with different schema URLs, so the
    addition is re-labelled with the base schema first.
    """
    if base.schema_url and addition.schema_url and base.schema_url != addition.schema_url:
        logger.debug(
            "Resource schema %s replaced by %s during merge",
            addition.schema_url,
            base.schema_url,
        )
        addition = Resource(addition.attributes, schema_url=base.schema_url)
    return addition.merge(base)


def with_resource(resource: Resource) -> ExporterOption:
    """Option adding caller resource attributes to the exporter's resource."""

    def apply(exporter: Exporter) -> None:
        if resource is None:
            raise ConfigurationError("with_resource() requires a Resource")
        exporter._resource = merge_resource(exporter._resource, resource)

    return apply


def with_batch_span_processors(*processors: SpanProcessor) -> ExporterOption:
    """Option appending span processors, in order."""

    def apply(exporter: Exporter) -> None:
        for processor in processors:
            if processor is None:
                raise ConfigurationError("Span processor must not be None")
            exporter._processors.append(processor)

    return apply


class Exporter:
    """Exports feature events as spans through a private TracerProvider.

    Build instances with ``new_exporter()``. The resource and the processor
    list are fixed once construction finishes.
    """

    def __init__(self) -> None:
        self._resource = default_resource()
        self._processors: list[SpanProcessor] = []
        self._provider: TracerProvider | None = None
        self._is_shutdown = False

    @property
    def resource(self) -> Resource:
        return self._resource

    @property
    def processors(self) -> tuple[SpanProcessor, ...]:
        return tuple(self._processors)

    @property
    def is_bulk(self) -> bool:
        """Events are exported in batches, one trace per batch."""
        return True

    def export(
        self,
        events: Iterable[FeatureEvent],
        context: Context | None = None,
    ) -> None:
        """Emit one parent span and one child span per event.

        Children are started and ended one after another under the parent,
        which ends last. Transmission is left to the span processors; this
        call does not wait for it.

        Args:
            events: Feature events to export.
            context: Optional OpenTelemetry context to parent the batch span.

        Raises:
            ExportError: If the exporter was never initialized or is shut down.
        """
        if self._provider is None or self._is_shutdown:
            raise ExportError("Exporter is not initialized or has been shut down")

        from flagtrace import __version__

        tracer = self._provider.get_tracer(INSTRUMENTATION_NAME, __version__)
        parent = tracer.start_span(INSTRUMENTATION_NAME, context=context)
        parent_context = trace.set_span_in_context(parent, context)

        count = 0
        try:
            for event in events:
                child = tracer.start_span(
                    span_name_for(event),
                    context=parent_context,
                    attributes=feature_event_to_attributes(event),
                )
                child.end()
                count += 1
        finally:
            parent.end()

        logger.debug("Exported %d feature events", count)

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Flush every processor; returns the SDK's result unchanged."""
        if self._provider is None:
            return True
        return self._provider.force_flush(timeout_millis)

    def shutdown(self) -> None:
        """Flush and shut down every processor.

        Idempotent: later calls do nothing.
        """
        if self._provider is None or self._is_shutdown:
            return
        self._is_shutdown = True
        self._provider.shutdown()
        logger.debug("Exporter shutdown complete")


def init_provider(exporter: Exporter) -> TracerProvider:
    """Create the TracerProvider for an exporter's resource and processors.

    Raises:
        ConfigurationError: If no span processor is registered.
    """
    if not exporter._processors:
        raise ConfigurationError("At least one span processor is required")

    provider = TracerProvider(resource=exporter._resource)
    for processor in exporter._processors:
        provider.add_span_processor(processor)
    return provider


def new_exporter(*options: ExporterOption) -> Exporter:
    """Build an exporter from options applied in order.

    Args:
        *options: Results of ``with_resource()`` and
            ``with_batch_span_processors()``.

    Returns:
        Exporter ready to export.

    Raises:
        ConfigurationError: If an option is invalid or no span processor
            was registered.
    """
    exporter = Exporter()
    for option in options:
        option(exporter)
    exporter._provider = init_provider(exporter)

    logger.debug(
        "Exporter configured with %d span processor(s) and resource %s",
        len(exporter._processors),
        dict(exporter._resource.attributes),
    )
    return exporter
