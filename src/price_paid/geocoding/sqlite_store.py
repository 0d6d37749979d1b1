"""SQLite geocoding store for local development.

Mirrors the Table Storage layout: one row per postcode keyed by
(partition_key, row_key) with ``lat``/``long`` columns.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiosqlite

from price_paid.errors import GeocodeBackendError
from price_paid.geocoding.lookup import LATITUDE_FIELD, LONGITUDE_FIELD
from price_paid.logging import get_logger

logger = get_logger(__name__)


class SqliteGeocodeStore:
    """Postcode coordinates in a local SQLite database."""

    def __init__(self, db_path: str) -> None:
        """Initialize store with database path.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
        """
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA busy_timeout=5000")
        return self._conn

    async def initialize(self) -> None:
        """Create the postcodes table if it does not exist."""
        conn = await self._get_connection()
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS postcodes (
                partition_key TEXT NOT NULL,
                row_key TEXT NOT NULL,
                lat REAL,
                long REAL,
                PRIMARY KEY (partition_key, row_key)
            )
        """)
        await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def upsert(
        self, partition_key: str, row_key: str, lat: float | None, long: float | None
    ) -> None:
        """Insert or replace a postcode row. Used to build test databases."""
        conn = await self._get_connection()
        await conn.execute(
            """
            INSERT INTO postcodes (partition_key, row_key, lat, long)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(partition_key, row_key) DO UPDATE SET
                lat = excluded.lat,
                long = excluded.long
            """,
            (partition_key, row_key, lat, long),
        )
        await conn.commit()

    async def fetch(self, partition_key: str, row_key: str) -> dict[str, Any] | None:
        """Read one postcode row as a Lat/Long entity, or None if absent."""
        try:
            conn = await self._get_connection()
            cursor = await conn.execute(
                "SELECT lat, long FROM postcodes WHERE partition_key = ? AND row_key = ?",
                (partition_key, row_key),
            )
            row = await cursor.fetchone()
            await cursor.close()
        except aiosqlite.Error as e:
            logger.error(
                "sqlite_geocode_lookup_failed",
                partition_key=partition_key,
                row_key=row_key,
                exc_info=True,
            )
            raise GeocodeBackendError(f"sqlite lookup failed: {e}") from e

        if row is None:
            return None
        entity: dict[str, Any] = {}
        if row["lat"] is not None:
            entity[LATITUDE_FIELD] = row["lat"]
        if row["long"] is not None:
            entity[LONGITUDE_FIELD] = row["long"]
        return entity
