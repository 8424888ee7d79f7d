"""Shared pytest configuration and fixtures.

This module provides test fixtures that:
1. Capture spans in memory to avoid network calls during tests
2. Build exporters that are shut down after each test, stopping any
   batch processor worker threads
3. Write YAML configuration files for the configuration loader
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generator

import pytest

from flagtrace.exporter import Exporter, new_exporter
from flagtrace.exporters import PersistentInMemoryExporter, in_memory
from tests.fakes import RecordingSpanProcessor, build_feature_events

if TYPE_CHECKING:
    from pathlib import Path

    from flagtrace.api.types import FeatureEvent
    from flagtrace.exporter import ExporterOption


@pytest.fixture(autouse=True)
def reset_in_memory_sinks() -> Generator[None, None, None]:
    """Drop the named in-memory sinks registered by config-built exporters."""
    yield
    in_memory._registry.clear()


@pytest.fixture
def memory_exporter() -> PersistentInMemoryExporter:
    """Provide a PersistentInMemoryExporter for capturing spans in tests."""
    return PersistentInMemoryExporter()


@pytest.fixture
def recorder() -> RecordingSpanProcessor:
    """Provide a RecordingSpanProcessor fake."""
    return RecordingSpanProcessor()


@pytest.fixture
def feature_events() -> list[FeatureEvent]:
    """Return the three sample feature events."""
    return build_feature_events()


@pytest.fixture
def exporter_factory() -> Generator[Callable[..., Exporter], None, None]:
    """Build exporters with new_exporter() and shut them down after the test.

    Usage:
        def test_something(exporter_factory, recorder):
            exporter = exporter_factory(with_batch_span_processors(recorder))
    """
    created: list[Exporter] = []

    def factory(*options: ExporterOption) -> Exporter:
        exporter = new_exporter(*options)
        created.append(exporter)
        return exporter

    yield factory

    for exporter in created:
        exporter.shutdown()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write YAML content to a config file and return its path."""

    def write(content: str) -> Path:
        config_path = tmp_path / "flagtrace.yaml"
        config_path.write_text(content)
        return config_path

    return write


@pytest.fixture
def valid_config_content() -> str:
    """Return valid YAML config content for tests."""
    return """resource:
  attributes:
    deployment.environment: test

processors:
  - type: in_memory
  - type: stdout
    batch: false

validation:
  mode: strict
"""
