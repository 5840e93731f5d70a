"""
SQLite Content Host

Design Decision: Why SQLite?
============================

The developer CLI needs a host that survives between invocations, so a
store written by one command can be read by the next.

Options Considered:
1. SQLite - Embedded, no server, single file
2. One text file per unit - Simple, but the active flag needs a side channel
3. JSON file - Whole-file rewrites on every save

Decision: SQLite with aiosqlite
- Zero configuration
- Name, content and active flag live in one row
- Async support via aiosqlite, matching the async host interface

Tables:
- content_units: one row per unit (name, content, active, updated_at)
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

import aiosqlite

from .base import ContentHost, ContentUnit
from ..errors import HostError, NotFoundError

logger = logging.getLogger(__name__)


@contextmanager
def _driver_errors(action: str):
    """Re-raise SQLite driver failures as HostError."""
    try:
        yield
    except aiosqlite.Error as e:
        raise HostError(f"Content host {action} failed: {e}") from e


class SQLiteHost(ContentHost):
    """
    Content-unit host persisted in a SQLite file.

    Emulates a device's script store: units are created on first save,
    overwritten whole afterwards, and keep their active flag across saves.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self):
        """Open database connection."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._init_schema()

        logger.info(f"Content host connected: {self.db_path}")

    async def close(self):
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def __aenter__(self) -> 'SQLiteHost':
        await self.connect()
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _init_schema(self):
        """Initialize database schema."""
        await self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS content_units (
                name TEXT PRIMARY KEY,
                content TEXT NOT NULL DEFAULT '',
                active INTEGER NOT NULL DEFAULT 1,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
        """)

        await self._connection.commit()

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise HostError("Content host is not connected")
        return self._connection

    # === Content Units ===

    async def get(self, name: Optional[str] = None,
                  with_content: bool = False) -> List[ContentUnit]:
        conn = self._require_connection()

        with _driver_errors('get'):
            if name is not None:
                async with conn.execute(
                    "SELECT name, content, active FROM content_units WHERE name = ?",
                    (name,)
                ) as cursor:
                    row = await cursor.fetchone()
                if row is None:
                    raise NotFoundError(name)
                return [self._row_to_unit(row, with_content)]

            async with conn.execute(
                "SELECT name, content, active FROM content_units ORDER BY name"
            ) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_unit(row, with_content) for row in rows]

    async def save(self, name: str, text: str):
        conn = self._require_connection()
        with _driver_errors('save'):
            await conn.execute(
                """INSERT INTO content_units (name, content, updated_at)
                   VALUES (?, ?, CURRENT_TIMESTAMP)
                   ON CONFLICT(name) DO UPDATE SET
                       content = ?, updated_at = CURRENT_TIMESTAMP""",
                (name, text, text)
            )
            await conn.commit()

    async def set_active(self, name: str, active: bool):
        """Activate or deactivate a unit."""
        conn = self._require_connection()
        with _driver_errors('set_active'):
            cursor = await conn.execute(
                "UPDATE content_units SET active = ? WHERE name = ?",
                (1 if active else 0, name)
            )
            await conn.commit()
        if cursor.rowcount == 0:
            raise NotFoundError(name)

    @staticmethod
    def _row_to_unit(row: aiosqlite.Row, with_content: bool) -> ContentUnit:
        return ContentUnit(
            name=row['name'],
            content=row['content'] if with_content else None,
            active=bool(row['active']),
        )


async def open_host(db_path: Path) -> SQLiteHost:
    """Open and return a connected SQLite host."""
    host = SQLiteHost(db_path)
    await host.connect()
    return host
