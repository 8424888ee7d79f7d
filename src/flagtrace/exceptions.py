"""Exception classes for the flagtrace exporter."""


class ConfigurationError(Exception):
    """Raised when the exporter cannot be built from its configuration.

    This covers a missing or invalid configuration file, a processor that
    could not be constructed, and an exporter with no span processor at all.
    """


class ExportError(Exception):
    """Raised when events are exported through an exporter that was shut down."""
