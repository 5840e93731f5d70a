"""Shared fixtures for the macro-memory test suite."""

import pytest

from macromem.host import InMemoryHost
from macromem.store import MemoryEngine, encode, initial_document

STORAGE = 'Memory_Storage'


@pytest.fixture
def host():
    """An in-memory host that already holds a freshly created store blob."""
    h = InMemoryHost()
    h.add(STORAGE, encode(initial_document()))
    return h


@pytest.fixture
def engine(host):
    """Engine whose default scope is 'ScriptA'."""
    return MemoryEngine(host, STORAGE, 'ScriptA')
