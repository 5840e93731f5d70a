"""
In-memory content host.

Holds units in a dict and yields to the event loop on every call, the way a
real host suspends the caller until it answers. That keeps interleavings of
concurrent callers observable in tests.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from .base import ContentHost, ContentUnit
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class InMemoryHost(ContentHost):
    """Dict-backed content-unit host."""

    def __init__(self, units: Optional[List[ContentUnit]] = None):
        self._units: Dict[str, ContentUnit] = {}
        for unit in units or []:
            self._units[unit.name] = ContentUnit(unit.name, unit.content or '', unit.active)

        # Every successful save as (name, text), in completion order
        self.saves: List[Tuple[str, str]] = []

    def add(self, name: str, content: str = '', active: bool = True):
        """Register a unit without recording a save."""
        self._units[name] = ContentUnit(name, content, active)

    def content_of(self, name: str) -> str:
        """Current text of a unit (synchronous helper)."""
        if name not in self._units:
            raise NotFoundError(name)
        return self._units[name].content

    def saves_for(self, name: str) -> List[str]:
        """Texts saved to ``name``, oldest first."""
        return [text for unit_name, text in self.saves if unit_name == name]

    async def get(self, name: Optional[str] = None,
                  with_content: bool = False) -> List[ContentUnit]:
        await asyncio.sleep(0)

        if name is not None:
            unit = self._units.get(name)
            if unit is None:
                raise NotFoundError(name)
            return [self._view(unit, with_content)]

        return [self._view(unit, with_content) for unit in self._units.values()]

    async def save(self, name: str, text: str):
        await asyncio.sleep(0)

        existing = self._units.get(name)
        active = existing.active if existing else True
        self._units[name] = ContentUnit(name, str(text), active)
        self.saves.append((name, str(text)))
        logger.debug(f"Saved unit {name} ({len(text)} chars)")

    @staticmethod
    def _view(unit: ContentUnit, with_content: bool) -> ContentUnit:
        return ContentUnit(
            name=unit.name,
            content=unit.content if with_content else None,
            active=unit.active,
        )
