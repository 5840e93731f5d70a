"""
macro-memory - durable key-value storage for hosted scripts

The host only stores named text units; this package keeps a scoped
key-value document in one of them and wires other units up to use it.
"""

from .config import Config, load_config
from .errors import (
    MacroMemoryError,
    HostError,
    NotFoundError,
    KeyNotFoundError,
    StoreCorruptError,
    ConfigurationError,
)
from .host import ContentUnit, ContentHost, InMemoryHost, SQLiteHost
from .store import MemoryEngine, ScopedMemory, resolve_identity
from .bootstrap import BootstrapTemplate, ImportPolicy, PropagationResult, propagate
from .runtime import MemoryRuntime, start_memory

__version__ = '1.0.0'

__all__ = [
    'Config',
    'load_config',
    'MacroMemoryError',
    'HostError',
    'NotFoundError',
    'KeyNotFoundError',
    'StoreCorruptError',
    'ConfigurationError',
    'ContentUnit',
    'ContentHost',
    'InMemoryHost',
    'SQLiteHost',
    'MemoryEngine',
    'ScopedMemory',
    'resolve_identity',
    'BootstrapTemplate',
    'ImportPolicy',
    'PropagationResult',
    'propagate',
    'MemoryRuntime',
    'start_memory',
]
