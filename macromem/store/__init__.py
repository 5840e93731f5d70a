"""
Store Module - Scoped Key-Value Storage

Persists a scope -> key -> value document inside a single content unit.
"""

from .codec import DECLARATION, INFO_KEY, decode, encode, initial_document
from .identity import DEFAULT_IDENTITY, name_from_locator, resolve_identity
from .engine import MemoryEngine, ScopedMemory

__all__ = [
    'DECLARATION',
    'INFO_KEY',
    'decode',
    'encode',
    'initial_document',
    'DEFAULT_IDENTITY',
    'name_from_locator',
    'resolve_identity',
    'MemoryEngine',
    'ScopedMemory',
]
