"""
Scoped Key-Value Engine

Design Decision: Namespaces
===========================

One store document holds everything:
- Named scopes: ``document[scope][key]``, one scope per consuming unit by
  default (its caller identity), or any explicit name via for_scope()
- Global namespace: ``document[key]``, visible to every caller

Scope names and global keys share the same top level of the document.

Design Decision: Update Cycle
=============================

The host offers no partial write, so every mutation is:

    get blob -> decode -> mutate in memory -> encode -> save blob

There is no lock and no version check. Two overlapping mutations race and
the last save wins, even when they touch different scopes. Scoping reduces
collisions but does not remove the race. Calls issued one after another
(each awaited) always see their own earlier writes.
"""

import logging
from typing import Any, Dict, Optional

from .codec import INFO_KEY, decode, encode
from ..errors import KeyNotFoundError, StoreCorruptError
from ..host import ContentHost

logger = logging.getLogger(__name__)


class MemoryEngine:
    """
    Key-value operations against the store blob.

    Every operation takes an optional ``scope``; when omitted the engine's
    ``local_script`` identity is used.
    """

    def __init__(self, host: ContentHost, storage_name: str, local_script: str):
        """
        Args:
            host: Content-unit API holding the store blob
            storage_name: Name of the store blob unit
            local_script: Default scope (the caller identity)
        """
        self.host = host
        self.storage_name = storage_name
        self.local_script = local_script

    # === Blob I/O ===

    async def _load(self) -> Dict[str, Any]:
        units = await self.host.get(self.storage_name, with_content=True)
        return decode(units[0].content or '')

    async def _store(self, document: Dict[str, Any]):
        await self.host.save(self.storage_name, encode(document))

    def _scope_name(self, scope: Optional[str]) -> str:
        return self.local_script if scope is None else scope

    @staticmethod
    def _scope_map(document: Dict[str, Any], scope: str) -> Dict[str, Any]:
        entries = document.get(scope, {})
        if not isinstance(entries, dict):
            raise StoreCorruptError(
                f"Scope '{scope}' holds a {type(entries).__name__}, not an object"
            )
        return entries

    # === Scoped Operations ===

    async def read(self, key: str, scope: Optional[str] = None) -> Any:
        """Read ``key`` from a scope."""
        scope = self._scope_name(scope)
        entries = self._scope_map(await self._load(), scope)

        if key not in entries:
            raise KeyNotFoundError(scope, key)
        return entries[key]

    async def write(self, key: str, value: Any, scope: Optional[str] = None) -> Any:
        """Insert or overwrite ``key`` in a scope. Returns ``value``."""
        scope = self._scope_name(scope)
        document = await self._load()
        entries = self._scope_map(document, scope)

        entries[key] = value
        document[scope] = entries
        await self._store(document)

        logger.debug(f"Local write: [{scope}] {key} = {value!r}")
        return value

    async def remove(self, key: str, scope: Optional[str] = None) -> str:
        """Delete ``key`` from a scope. Returns the removed key."""
        scope = self._scope_name(scope)
        document = await self._load()
        entries = self._scope_map(document, scope)

        if key not in entries:
            raise KeyNotFoundError(scope, key)

        old_value = entries.pop(key)
        document[scope] = entries
        await self._store(document)

        logger.warning(f"Local key '{key}' ({old_value!r}) deleted from {scope}")
        return key

    async def print(self, scope: Optional[str] = None) -> Dict[str, Any]:
        """
        Dump one scope's map.

        The scope is looked up as a global key, so a scope that was never
        written raises KeyNotFoundError(None, scope).
        """
        scope = self._scope_name(scope)
        entries = await self.read_global(scope)
        logger.info(f"Scope {scope}: {entries!r}")
        return entries

    # === Global Operations ===

    async def read_global(self, key: str) -> Any:
        """Read a top-level key."""
        document = await self._load()
        if key not in document:
            raise KeyNotFoundError(None, key)
        return document[key]

    async def write_global(self, key: str, value: Any) -> Any:
        """Insert or overwrite a top-level key. Returns ``value``."""
        document = await self._load()
        document[key] = value
        await self._store(document)

        logger.debug(f"Global write: {key} = {value!r}")
        return value

    async def remove_global(self, key: str) -> str:
        """Delete a top-level key. Returns the removed key."""
        document = await self._load()
        if key not in document:
            raise KeyNotFoundError(None, key)

        old_value = document.pop(key)
        await self._store(document)

        logger.warning(f"Global key '{key}' ({old_value!r}) deleted")
        return key

    async def print_global(self) -> Dict[str, Any]:
        """Dump the whole document."""
        document = await self._load()
        logger.info(f"Store {self.storage_name}: {document!r}")
        return document

    async def info(self) -> Dict[str, Any]:
        """The documentation record seeded at store creation."""
        record = await self.read_global(INFO_KEY)
        logger.info(f"Store info: {record!r}")
        return record

    # === Scoping ===

    def for_scope(self, name: str) -> 'ScopedMemory':
        """Operations bound to an explicit scope ``name``."""
        return ScopedMemory(self, name)


class ScopedMemory:
    """
    An engine view pinned to one scope.

    Lets two components inside the same consuming unit keep separate keys
    without changing the engine's own ``local_script``.
    """

    def __init__(self, engine: MemoryEngine, scope: str):
        self.engine = engine
        self.scope = scope

    async def read(self, key: str) -> Any:
        return await self.engine.read(key, scope=self.scope)

    async def write(self, key: str, value: Any) -> Any:
        return await self.engine.write(key, value, scope=self.scope)

    async def remove(self, key: str) -> str:
        return await self.engine.remove(key, scope=self.scope)

    async def print(self) -> Dict[str, Any]:
        return await self.engine.print(scope=self.scope)

    async def read_global(self, key: str) -> Any:
        return await self.engine.read_global(key)

    async def write_global(self, key: str, value: Any) -> Any:
        return await self.engine.write_global(key, value)

    async def remove_global(self, key: str) -> str:
        return await self.engine.remove_global(key)

    async def print_global(self) -> Dict[str, Any]:
        return await self.engine.print_global()

    async def info(self) -> Dict[str, Any]:
        return await self.engine.info()

    def __repr__(self) -> str:
        return f"ScopedMemory(scope={self.scope!r})"
