"""OTLP collector exporter and span processor.

Provides factory functions for shipping spans to an OpenTelemetry collector.
gRPC is the default transport; HTTP/protobuf is also supported.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

from flagtrace.exceptions import ConfigurationError

if TYPE_CHECKING:
    import grpc
    from opentelemetry.sdk.trace import SpanProcessor
    from opentelemetry.sdk.trace.export import SpanExporter

    from flagtrace.api.types import ProcessorConfig

logger = logging.getLogger(__name__)

VALID_TRANSPORTS = ("grpc", "http")


def otel_exporter(
    endpoint: str,
    *,
    transport: str = "grpc",
    insecure: bool | None = None,
    credentials: grpc.ChannelCredentials | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> SpanExporter:
    """Create an OTLP span exporter for a collector endpoint.

    The gRPC transport needs an explicit channel choice: ``insecure=True``
    for a plaintext channel, or ``credentials`` (or ``insecure=False`` for
    TLS with the system trust store).

    Args:
        endpoint: Collector endpoint, e.g. "localhost:4317" for gRPC or
            "http://localhost:4318" for HTTP.
        transport: "grpc" or "http".
        insecure: Use a plaintext gRPC channel.
        credentials: gRPC channel credentials.
        headers: Extra request headers (gRPC metadata or HTTP headers).
        timeout: Export timeout in seconds.

    Returns:
        Configured SpanExporter.

    Raises:
        ConfigurationError: If the endpoint is empty, the transport is unknown,
            or a gRPC exporter is requested without channel options.
    """
    if not endpoint:
        raise ConfigurationError("An OTLP collector endpoint is required")

    if transport == "grpc":
        if insecure is None and credentials is None:
            raise ConfigurationError(
                "gRPC collector exporter needs channel options: "
                "pass insecure=True or credentials"
            )
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter as GRPCSpanExporter,
        )

        logger.debug("Creating gRPC OTLP exporter for %s", endpoint)
        return GRPCSpanExporter(
            endpoint=endpoint,
            insecure=insecure,
            credentials=credentials,
            headers=tuple(headers.items()) if headers else None,
            timeout=timeout,
        )

    if transport == "http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPSpanExporter,
        )

        traces_endpoint = endpoint
        if not traces_endpoint.endswith("/v1/traces"):
            traces_endpoint = f"{endpoint.rstrip('/')}/v1/traces"
        logger.debug("Creating HTTP OTLP exporter for %s", traces_endpoint)
        return HTTPSpanExporter(
            endpoint=traces_endpoint,
            headers=headers or None,
            timeout=timeout,
        )

    raise ConfigurationError(
        f"Unknown OTLP transport: {transport}. "
        f"Valid transports: {', '.join(VALID_TRANSPORTS)}"
    )


def otel_collector_batch_span_processor(
    endpoint: str,
    *,
    transport: str = "grpc",
    insecure: bool | None = None,
    credentials: grpc.ChannelCredentials | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> BatchSpanProcessor:
    """Create a batch span processor shipping spans to an OTel collector.

    Accepts the same arguments as ``otel_exporter``.

    Raises:
        ConfigurationError: If the underlying exporter cannot be built.
    """
    exporter = otel_exporter(
        endpoint,
        transport=transport,
        insecure=insecure,
        credentials=credentials,
        headers=headers,
        timeout=timeout,
    )
    return BatchSpanProcessor(exporter)


def create_otlp_processor(config: ProcessorConfig) -> SpanProcessor:
    """Create the collector processor for a processor entry.

    Raises:
        ConfigurationError: If the entry does not describe a usable exporter.
    """
    exporter = otel_exporter(
        config.endpoint,
        transport=config.transport,
        insecure=config.insecure,
        headers=config.headers,
        timeout=config.timeout,
    )
    if config.batch:
        return BatchSpanProcessor(exporter)
    return SimpleSpanProcessor(exporter)
