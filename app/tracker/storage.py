"""Persistence boundary — one serialized snapshot under one fixed key.

Table: tracker_snapshots
  snapshot_key (text, primary key), payload (text, JSON), updated_at (text, ISO-8601)

The store never talks SQL; it only sees `read()` / `write()` and
`StorageError`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

_CREATE_TABLE = (
    "CREATE TABLE IF NOT EXISTS tracker_snapshots ("
    "snapshot_key TEXT PRIMARY KEY, "
    "payload TEXT NOT NULL, "
    "updated_at TEXT NOT NULL)"
)

_UPSERT = (
    "INSERT INTO tracker_snapshots (snapshot_key, payload, updated_at) "
    "VALUES (:key, :payload, :updated_at) "
    "ON CONFLICT (snapshot_key) DO UPDATE SET "
    "payload = excluded.payload, updated_at = excluded.updated_at"
)


class StorageError(Exception):
    """Raised when the underlying medium cannot be read or written."""


class SnapshotStorage(Protocol):
    async def read(self) -> str | None: ...

    async def write(self, payload: str) -> None: ...


class SqlSnapshotStorage:
    """Snapshot payload stored as a single row in a SQL table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], key: str):
        self._session_factory = session_factory
        self.key = key
        self._schema_ready = False

    async def _ensure_schema(self, session: AsyncSession) -> None:
        if not self._schema_ready:
            await session.execute(text(_CREATE_TABLE))
            self._schema_ready = True

    async def read(self) -> str | None:
        """Return the stored payload, or None when nothing has been written yet."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._ensure_schema(session)
                    result = await session.execute(
                        text("SELECT payload FROM tracker_snapshots WHERE snapshot_key = :key"),
                        {"key": self.key},
                    )
                    row = result.fetchone()
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not read snapshot '{self.key}': {exc}") from exc
        if row is None:
            return None
        return row[0]

    async def write(self, payload: str) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self._ensure_schema(session)
                    await session.execute(
                        text(_UPSERT),
                        {
                            "key": self.key,
                            "payload": payload,
                            "updated_at": datetime.now(timezone.utc).isoformat(),
                        },
                    )
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not write snapshot '{self.key}': {exc}") from exc
