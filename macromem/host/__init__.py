"""
Host Module - Content-Unit API

The narrow create/fetch/overwrite API the store is built on, plus adapters.
"""

from .base import ContentUnit, ContentHost
from .memory import InMemoryHost
from .database import SQLiteHost, open_host

__all__ = ['ContentUnit', 'ContentHost', 'InMemoryHost', 'SQLiteHost', 'open_host']
