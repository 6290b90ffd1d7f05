"""Publication sinks for size history."""

from .publisher import Publisher, HttpPublisher

__all__ = ['Publisher', 'HttpPublisher']
