"""Error handling — exceptions and transport error classification."""

from mjmlcache.errors.exceptions import (
    AuthenticationError,
    ConfigurationMismatch,
    MarkupStructureError,
    MjmlCacheError,
    TransportError,
)

__all__ = [
    "MjmlCacheError",
    "TransportError",
    "AuthenticationError",
    "MarkupStructureError",
    "ConfigurationMismatch",
]
