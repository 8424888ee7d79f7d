"""Public types for the flagtrace exporter.

These types are part of the stable public API and follow semver guarantees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FeatureEvent:
    """One feature flag evaluation, as produced by the flag evaluation engine.

    ``value`` is the evaluated variation value and may be any scalar or
    nested structure. ``source_flag_key`` and ``target_flag_key`` are only
    set by migration evaluations.
    """

    kind: str = "feature"
    context_kind: str = ""
    user_key: str = ""
    creation_date: int = 0
    key: str = ""
    variation: str = ""
    value: Any = None
    default: bool = False
    version: str = ""
    # Where the evaluation happened, e.g. "SERVER" or "PROVIDER_CACHE"
    source: str = "SERVER"
    source_flag_key: str = ""
    target_flag_key: str = ""


@dataclass
class ResourceConfig:
    """Caller-supplied resource attributes.

    These are merged into the exporter's default resource; the defaults
    win on conflicting keys.
    """

    attributes: dict[str, Any] = field(default_factory=dict)
    schema_url: str = ""


@dataclass
class ProcessorConfig:
    """One span processor to register on the exporter."""

    type: str  # "otlp" | "stdout" | "in_memory"
    endpoint: str = ""
    # Transport protocol for otlp: "grpc" (default) or "http"
    transport: str = "grpc"
    # gRPC requires an explicit choice between an insecure channel and TLS
    insecure: bool | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    # True for BatchSpanProcessor (default), False for SimpleSpanProcessor
    batch: bool = True
    # in_memory only: registry key passed to get_in_memory_exporter()
    name: str = "default"


@dataclass
class ValidationConfig:
    """Validation mode configuration."""

    mode: str = "permissive"  # "strict" | "permissive"


@dataclass
class Config:
    """Complete exporter configuration."""

    processors: list[ProcessorConfig] = field(default_factory=list)
    resource: ResourceConfig = field(default_factory=ResourceConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    @property
    def is_strict(self) -> bool:
        """Return True if validation mode is strict."""
        return self.validation.mode == "strict"
