"""Errors that abort a size tracking run.

Only misconfiguration escapes the pipeline. I/O trouble (unreadable
outputs, corrupt history, failed uploads) is absorbed and logged where it
happens.
"""


class ConfigurationError(ValueError):
    """Raised when the tracker cannot run with the given configuration."""


class PatternError(ConfigurationError):
    """Raised when an include or exclude glob cannot be compiled."""


class UnsupportedCompressionError(ConfigurationError):
    """Raised when the configured compression is unavailable in this runtime."""
