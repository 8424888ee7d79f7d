"""Public API for the flagtrace exporter.

This module re-exports the stable public interface:
- create_exporter() - Build an Exporter from configuration
- FeatureEvent - The event type the exporter turns into spans
- Config and related types - Programmatic configuration
"""

from __future__ import annotations

from flagtrace.api._init import create_exporter
from flagtrace.api.types import (
    Config,
    FeatureEvent,
    ProcessorConfig,
    ResourceConfig,
    ValidationConfig,
)

__all__ = [
    "create_exporter",
    "FeatureEvent",
    "Config",
    "ProcessorConfig",
    "ResourceConfig",
    "ValidationConfig",
]
