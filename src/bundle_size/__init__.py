"""Track compressed build output sizes across builds."""

__version__ = "0.1.0"
