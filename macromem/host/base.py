"""
Content-Unit Host Interface

Design Decision: What the store depends on
==========================================

The host exposes many commands, but the store only needs two:

1. Get  - fetch one named unit (or all units), optionally with content
2. Save - create a unit, or overwrite it whole

There is no append, no partial write and no compare-and-swap. Everything
above this layer is built from whole-unit reads and whole-unit overwrites.

Adapters:
- InMemoryHost  - process-local dict, used for tests and embedding
- SQLiteHost    - aiosqlite file, used by the developer CLI to emulate a device
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ContentUnit:
    """A named text resource held by the host."""
    name: str
    content: Optional[str] = None  # None unless requested with content
    active: bool = True


class ContentHost(ABC):
    """Async content-unit API."""

    @abstractmethod
    async def get(self, name: Optional[str] = None,
                  with_content: bool = False) -> List[ContentUnit]:
        """
        Fetch content units.

        Args:
            name: Unit to fetch. When omitted, every known unit is returned.
            with_content: Include each unit's text.

        Returns:
            A one-element list when ``name`` is given, else all units.

        Raises:
            NotFoundError: ``name`` was given and no such unit exists.
        """

    @abstractmethod
    async def save(self, name: str, text: str):
        """Create ``name`` or overwrite its whole content with ``text``."""
