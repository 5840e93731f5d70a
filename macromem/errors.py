"""
Exception hierarchy for macro-memory.

Every failure surfaced by the store, the host adapters or the bootstrap
pass is a subclass of MacroMemoryError, so callers can catch the whole
family with one clause.
"""

from typing import Optional

__all__ = [
    'MacroMemoryError',
    'HostError',
    'NotFoundError',
    'KeyNotFoundError',
    'StoreCorruptError',
    'ConfigurationError',
]


class MacroMemoryError(Exception):
    """Root exception for all macro-memory errors."""


# === Host API ===

class HostError(MacroMemoryError):
    """Raised when a content-unit API call fails."""


class NotFoundError(HostError):
    """Raised when a requested content unit does not exist on the host."""

    def __init__(self, name: str):
        super().__init__(f"Content unit not found: {name}")
        self.name = name


# === Store ===

class KeyNotFoundError(MacroMemoryError):
    """
    Raised on read/remove of a key that is not present.

    ``scope`` is None for the global namespace.
    """

    def __init__(self, scope: Optional[str], key: str):
        if scope is None:
            message = f"Global key '{key}' not found"
        else:
            message = f"Key '{key}' not found in scope '{scope}'"
        super().__init__(message)
        self.scope = scope
        self.key = key


class StoreCorruptError(MacroMemoryError):
    """Raised when the store blob text cannot be decoded."""


# === Configuration ===

class ConfigurationError(MacroMemoryError):
    """Raised for unrecognised configuration values."""
