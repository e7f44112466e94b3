"""SQLite store implementation for local runs and tests."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from ..config import resolve_db_path
from ..models import Observation, Trace
from .store import Dialect, StoreQueryError

# Matches the text form of SQLite's datetime('now', ...) so comparisons stay lexical.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def _to_db_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _from_db_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


class SqliteStore:
    """SQLite-backed trace store."""

    dialect: Dialect = "sqlite"

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def query(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
        tags: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a query with ``:name`` placeholders bound from params."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        try:
            async with self._conn.execute(sql, params or {}) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreQueryError(f"SQLite query failed: {e}") from e

        return [dict(row) for row in rows]

    # Traces
    async def save_trace(self, trace: Trace) -> None:
        """Insert or replace a trace."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO traces (id, timestamp, metadata)
            VALUES (?, ?, ?)
            """,
            (trace.id, _to_db_timestamp(trace.timestamp), json.dumps(trace.metadata)),
        )
        await self._conn.commit()

    async def get_trace(self, trace_id: str) -> Trace | None:
        """Get a trace by ID."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            "SELECT id, timestamp, metadata FROM traces WHERE id = ?",
            (trace_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return Trace(
            id=row["id"],
            timestamp=_from_db_timestamp(row["timestamp"]),
            metadata=json.loads(row["metadata"]),
        )

    async def mark_processed(
        self, trace_id: str, marker_key: str, value: str
    ) -> bool:
        """Set the marker key on a trace. Returns False if it was already set."""
        trace = await self.get_trace(trace_id)
        if trace is None:
            raise KeyError(trace_id)
        if trace.is_processed(marker_key):
            return False

        trace.metadata[marker_key] = value
        await self.save_trace(trace)
        return True

    # Observations
    async def save_observation(self, observation: Observation) -> None:
        """Insert or replace an observation."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO observations (id, trace_id, updated_at)
            VALUES (?, ?, ?)
            """,
            (
                observation.id,
                observation.trace_id,
                _to_db_timestamp(observation.updated_at),
            ),
        )
        await self._conn.commit()

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute("DELETE FROM observations")
        await self._conn.execute("DELETE FROM traces")
        await self._conn.commit()
