"""Async SQLite database layer using aiosqlite.

Provides connection management, schema migration and small query helpers.
A single ``Database`` is opened by the entry point and handed to the
inventory store; it also supports the async context-manager protocol.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiosqlite

from src.utils.logger import get_logger

log = get_logger(__name__, component="database")


class Database:
    """Thin async wrapper around an aiosqlite connection.

    Parameters
    ----------
    db_path:
        File-system path to the SQLite database, or ``":memory:"``.
        Parent directories are created automatically.
    """

    def __init__(self, db_path: str = "data/restock.db") -> None:
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the database connection, enable WAL mode, and run migrations."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.commit()
        log.info("database_connected", path=self._db_path)
        await self.migrate()

    async def close(self) -> None:
        """Close the database connection gracefully."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            log.info("database_closed")

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Migrations
    # ------------------------------------------------------------------

    async def migrate(self) -> None:
        """Create the inventory table if it does not already exist."""
        assert self._conn is not None, "Database is not connected"

        await self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS inventory_items (
                id                TEXT    PRIMARY KEY,
                collection        TEXT    NOT NULL,
                name              TEXT    NOT NULL,
                current_stock     REAL    NOT NULL,
                reorder_level     REAL    NOT NULL,
                unit              TEXT    NOT NULL,
                unit_cost         REAL    NOT NULL DEFAULT 0,
                primary_vendor    TEXT    NOT NULL DEFAULT '',
                vendor_contact    TEXT    NOT NULL DEFAULT '',
                is_ordered        INTEGER NOT NULL DEFAULT 0,
                expected_delivery TEXT,
                created_at        TEXT    NOT NULL,
                updated_at        TEXT    NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_inventory_collection
                ON inventory_items (collection);
            """
        )
        await self._conn.commit()
        log.info("database_migrated")

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    @property
    def conn(self) -> aiosqlite.Connection:
        """Return the raw connection, raising if not connected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self._conn

    async def execute(
        self, sql: str, params: tuple[Any, ...] = ()
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement and commit, returning the cursor."""
        cursor = await self.conn.execute(sql, params)
        await self.conn.commit()
        return cursor

    async def fetch_one(
        self, sql: str, params: tuple[Any, ...] = ()
    ) -> dict[str, Any] | None:
        """Fetch a single row as a dictionary, or ``None`` when nothing matches."""
        cursor = await self.conn.execute(sql, params)
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def fetch_all(
        self, sql: str, params: tuple[Any, ...] = ()
    ) -> list[dict[str, Any]]:
        """Fetch all matching rows, each returned as a dictionary."""
        cursor = await self.conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]
