"""Configuration-driven entry point: create_exporter().

This module builds an Exporter from a YAML file, a Config object, or the
FLAGTRACE_CONFIG_PATH environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from flagtrace.exceptions import ConfigurationError
from flagtrace.exporter import new_exporter
from flagtrace.sdk.config.load import load_config, validate_config
from flagtrace.sdk.pipeline import build_options

if TYPE_CHECKING:
    from flagtrace.api.types import Config
    from flagtrace.exporter import Exporter

logger = logging.getLogger(__name__)

# Environment variable for config path fallback
FLAGTRACE_CONFIG_PATH_ENV = "FLAGTRACE_CONFIG_PATH"


def _resolve_config_path(config_path: str | Path | None) -> Path:
    """Resolve configuration file path from argument or environment.

    Raises:
        ConfigurationError: If no config path is provided and
                           FLAGTRACE_CONFIG_PATH env var is not set.
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.environ.get(FLAGTRACE_CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    raise ConfigurationError(
        f"No configuration path provided. Either pass a config path to "
        f"create_exporter() or set the {FLAGTRACE_CONFIG_PATH_ENV} environment variable."
    )


def create_exporter(config: str | Path | Config | None = None) -> Exporter:
    """Create an Exporter from configuration.

    Configuration can be provided as:
    - A path to a YAML config file (str or Path)
    - A Config object for programmatic configuration
    - None to use the FLAGTRACE_CONFIG_PATH environment variable

    Args:
        config: Configuration source.

    Returns:
        Exporter with the configured resource and span processors.

    Raises:
        ConfigurationError: If configuration is missing or invalid, or if no
            span processor could be built (in any validation mode).
    """
    from flagtrace.api.types import Config as ConfigType

    if isinstance(config, ConfigType):
        resolved_config = config
        errors = validate_config(resolved_config)
        if errors and resolved_config.is_strict:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}"
            )
    else:
        resolved_config = load_config(_resolve_config_path(config))

    exporter = new_exporter(*build_options(resolved_config))
    logger.debug(
        "Exporter created from configuration with %d processor(s)",
        len(exporter.processors),
    )
    return exporter
