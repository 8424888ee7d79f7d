"""Configuration loading, parsing, and validation for the flagtrace exporter."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from flagtrace.api.types import (
    Config,
    ProcessorConfig,
    ResourceConfig,
    ValidationConfig,
)
from flagtrace.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Pattern for environment variable substitution: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Valid processor types
VALID_PROCESSOR_TYPES = {"otlp", "stdout", "in_memory"}

VALID_TRANSPORTS = {"grpc", "http"}


def _substitute_env_vars(value: str, strict: bool) -> str:
    """Substitute ${VAR_NAME} patterns with environment variable values.

    Args:
        value: String potentially containing ${VAR_NAME} patterns.
        strict: If True, raise ConfigurationError for missing env vars.

    Returns:
        String with environment variables substituted.

    Raises:
        ConfigurationError: If strict=True and an env var is not set.
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            if strict:
                raise ConfigurationError(
                    f"Environment variable '{var_name}' is not set"
                )
            logger.warning(
                "Environment variable '%s' not set, using empty string", var_name
            )
            return ""
        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any, strict: bool) -> Any:
    """Recursively substitute environment variables in a data structure."""
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v, strict) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item, strict) for item in data]
    elif isinstance(data, str):
        return _substitute_env_vars(data, strict)
    else:
        return data


def _parse_resource_config(data: dict[str, Any]) -> ResourceConfig:
    """Parse resource configuration section."""
    attributes = data.get("attributes") or {}
    if not isinstance(attributes, dict):
        logger.warning("resource.attributes must be a mapping, ignoring it")
        attributes = {}
    return ResourceConfig(
        attributes={str(k): v for k, v in attributes.items()},
        schema_url=data.get("schema_url", "") or "",
    )


def _reject(message: str, strict: bool) -> None:
    """Raise in strict mode, otherwise log the problem and let the caller fall back."""
    if strict:
        raise ConfigurationError(message)
    logger.warning("%s, using the default", message)


def _parse_processor_config(data: dict[str, Any], strict: bool = False) -> ProcessorConfig:
    """Parse one entry of the processors section.

    Raises:
        ConfigurationError: If strict and ``headers`` or ``timeout`` is malformed.
    """
    insecure = data.get("insecure")

    headers = data.get("headers") or {}
    if not isinstance(headers, dict):
        _reject("processors[].headers must be a mapping", strict)
        headers = {}

    timeout = data.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            _reject(f"processors[].timeout must be a number, got {timeout!r}", strict)
            timeout = None

    return ProcessorConfig(
        type=str(data.get("type", "")),
        endpoint=data.get("endpoint", "") or "",
        transport=data.get("transport", "grpc"),
        insecure=None if insecure is None else bool(insecure),
        headers={str(k): str(v) for k, v in headers.items()},
        timeout=timeout,
        batch=bool(data.get("batch", True)),
        name=str(data.get("name") or "default"),
    )


def _parse_validation_config(data: dict[str, Any]) -> ValidationConfig:
    """Parse validation configuration section."""
    mode = data.get("mode", "permissive")
    if mode not in ("strict", "permissive"):
        logger.warning("Unknown validation mode '%s', defaulting to permissive", mode)
        mode = "permissive"
    return ValidationConfig(mode=mode)


def validate_processor(processor: ProcessorConfig) -> list[str]:
    """Validate one processor entry and return its error messages."""
    errors: list[str] = []

    if processor.type not in VALID_PROCESSOR_TYPES:
        errors.append(
            f"Unknown processor type: '{processor.type}'. "
            f"Valid values: {', '.join(sorted(VALID_PROCESSOR_TYPES))}"
        )
    elif processor.type == "otlp":
        if not processor.endpoint:
            errors.append("processors[].endpoint is required for type 'otlp'")
        if processor.transport not in VALID_TRANSPORTS:
            errors.append(
                f"Unknown transport '{processor.transport}'. "
                f"Valid values: {', '.join(sorted(VALID_TRANSPORTS))}"
            )

    return errors


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages.

    Args:
        config: Parsed configuration to validate.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors: list[str] = []

    if not config.processors:
        errors.append("at least one entry in processors is required")

    for processor in config.processors:
        errors.extend(validate_processor(processor))

    return errors


def load_config(path: str | Path, strict: bool | None = None) -> Config:
    """Load and parse configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
        strict: Override validation mode. If None, use mode from config file.

    Returns:
        Parsed and validated Config.

    Raises:
        ConfigurationError: If file doesn't exist, YAML is invalid,
                           or validation fails in strict mode.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            raw_data = yaml.safe_load(f)
            if raw_data is None:
                raw_data = {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(raw_data).__name__}"
        )

    # Determine validation mode early (needed for env var substitution)
    validation_data = raw_data.get("validation") or {}
    if not isinstance(validation_data, dict):
        raise ConfigurationError("'validation' must be a mapping with a 'mode' key")
    validation_mode = validation_data.get("mode", "permissive")
    is_strict = strict if strict is not None else (validation_mode == "strict")

    data = _substitute_env_vars_recursive(raw_data, strict=is_strict)

    processors_data = data.get("processors") or []
    if not isinstance(processors_data, list):
        raise ConfigurationError("'processors' must be a list")

    resource_data = data.get("resource") or {}
    if not isinstance(resource_data, dict):
        raise ConfigurationError("'resource' must be a mapping")

    config = Config(
        processors=[
            _parse_processor_config(entry, strict=is_strict)
            for entry in processors_data
            if isinstance(entry, dict)
        ],
        resource=_parse_resource_config(resource_data),
        validation=_parse_validation_config(validation_data),
    )

    # Override validation mode if specified
    if strict is not None:
        config.validation.mode = "strict" if strict else "permissive"

    errors = validate_config(config)
    if errors and config.is_strict:
        raise ConfigurationError(
            f"Configuration validation failed: {'; '.join(errors)}"
        )
    for error in errors:
        logger.warning("Configuration problem ignored in permissive mode: %s", error)

    return config
