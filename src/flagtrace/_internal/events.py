"""Mapping of feature events to span names and attributes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flagtrace._internal.attributes import AttributeValue, value_to_attributes

if TYPE_CHECKING:
    from flagtrace.api.types import FeatureEvent

# Name of the tracer and of the parent span opened for every export batch
INSTRUMENTATION_NAME = "flagtrace.exporter"

# Child span name for events without a flag key
DEFAULT_EVENT_SPAN_NAME = "feature-flag-evaluation"

VALUE_PREFIX = "value"
VALUE_MAX_DEPTH = 2

KIND_ATTR = "kind"
CONTEXT_KIND_ATTR = "contextKind"
USER_KEY_ATTR = "userKey"
CREATION_DATE_ATTR = "creationDate"
KEY_ATTR = "key"
VARIATION_ATTR = "variation"
DEFAULT_ATTR = "default"
VERSION_ATTR = "version"
SOURCE_ATTR = "source"
SOURCE_FLAG_KEY_ATTR = "sourceFlagKey"
TARGET_FLAG_KEY_ATTR = "targetFlagKey"


def feature_event_to_attributes(event: FeatureEvent) -> dict[str, AttributeValue]:
    """Build the span attributes for one feature event.

    The fixed event fields are always present; the migration flag keys only
    when set. The evaluated value is flattened under ``value``.
    """
    attributes = value_to_attributes(event.value, VALUE_PREFIX, VALUE_MAX_DEPTH, 0)

    attributes.update(
        {
            KIND_ATTR: event.kind,
            CONTEXT_KIND_ATTR: event.context_kind,
            USER_KEY_ATTR: event.user_key,
            CREATION_DATE_ATTR: int(event.creation_date),
            KEY_ATTR: event.key,
            VARIATION_ATTR: event.variation,
            DEFAULT_ATTR: bool(event.default),
            VERSION_ATTR: event.version,
            SOURCE_ATTR: event.source,
        }
    )
    if event.source_flag_key:
        attributes[SOURCE_FLAG_KEY_ATTR] = event.source_flag_key
    if event.target_flag_key:
        attributes[TARGET_FLAG_KEY_ATTR] = event.target_flag_key

    return attributes


def span_name_for(event: FeatureEvent) -> str:
    """Return the child span name for an event: its flag key."""
    return event.key or DEFAULT_EVENT_SPAN_NAME
