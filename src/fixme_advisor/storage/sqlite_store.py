"""SQLite event store backend."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

import aiosqlite

from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.storage.base import (
    MAX_USAGE_RECORDS,
    EventStore,
    EventStoreError,
    StoreSnapshot,
)
from fixme_advisor.storage.sqlite_schema import SCHEMA, SCHEMA_VERSION

logger = logging.getLogger(__name__)


class SQLiteEventStore(EventStore):
    """SQLite-based event store.

    Appends are single INSERTs (plus a truncating DELETE for the usage log)
    instead of full rewrites; reads still return the complete snapshot.
    """

    def __init__(self, db_path: str | Path, max_usage_records: int = MAX_USAGE_RECORDS) -> None:
        super().__init__(max_usage_records=max_usage_records)
        self._db_path = Path(db_path).resolve()
        self._conn: aiosqlite.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        """Open the database connection and create the schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = await aiosqlite.connect(self._db_path)
            self._conn.row_factory = aiosqlite.Row

            await self._conn.execute("PRAGMA journal_mode=WAL")
            await self._conn.execute("PRAGMA synchronous=NORMAL")
            await self._conn.executescript(SCHEMA)

            async with self._conn.execute("SELECT version FROM schema_version") as cursor:
                row = await cursor.fetchone()
            if row is None:
                await self._conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
                )
            await self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            await self.close()
            raise EventStoreError(f"Cannot open event store {self._db_path}: {e}") from e

        logger.info("Opened SQLite event store at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> aiosqlite.Connection:
        """Ensure connection is available."""
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._conn

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Commit on success, roll back and wrap database errors on failure."""
        conn = self._ensure_conn()
        try:
            yield conn
            await conn.commit()
        except sqlite3.Error as e:
            await conn.rollback()
            raise EventStoreError(f"Event store {operation} failed: {e}") from e

    # ========== Snapshot Contract ==========

    async def read_store(self) -> StoreSnapshot:
        conn = self._ensure_conn()
        samples: list[TrainingSample] = []
        records: list[UsageRecord] = []

        try:
            async with conn.execute(
                """SELECT features, action_type, effectiveness, created_at
                   FROM training_samples ORDER BY id ASC"""
            ) as cursor:
                async for row in cursor:
                    samples.append(
                        TrainingSample.create(
                            features=json.loads(row["features"]),
                            action_type=row["action_type"],
                            effectiveness=row["effectiveness"],
                            created_at=datetime.fromisoformat(row["created_at"]),
                        )
                    )

            async with conn.execute(
                """SELECT action_type, timestamp_ms, success, details
                   FROM usage_records ORDER BY id ASC"""
            ) as cursor:
                async for row in cursor:
                    records.append(
                        UsageRecord(
                            action_type=row["action_type"],
                            timestamp_ms=row["timestamp_ms"],
                            success=bool(row["success"]),
                            details=json.loads(row["details"] or "{}"),
                        )
                    )
        except (sqlite3.Error, json.JSONDecodeError) as e:
            raise EventStoreError(f"Event store read failed: {e}") from e

        return StoreSnapshot(training_samples=tuple(samples), usage_records=tuple(records))

    async def write_store(self, snapshot: StoreSnapshot) -> None:
        usage_records = snapshot.usage_records[-self.max_usage_records :]
        async with self._transaction("write") as conn:
            await conn.execute("DELETE FROM training_samples")
            await conn.execute("DELETE FROM usage_records")
            await conn.executemany(
                """INSERT INTO training_samples (features, action_type, effectiveness, created_at)
                   VALUES (?, ?, ?, ?)""",
                [_sample_row(s) for s in snapshot.training_samples],
            )
            await conn.executemany(
                """INSERT INTO usage_records (action_type, timestamp_ms, success, details)
                   VALUES (?, ?, ?, ?)""",
                [_record_row(r) for r in usage_records],
            )

    # ========== Appends ==========

    async def append_training_sample(self, sample: TrainingSample) -> None:
        async with self._write_lock, self._transaction("append") as conn:
            await conn.execute(
                """INSERT INTO training_samples (features, action_type, effectiveness, created_at)
                   VALUES (?, ?, ?, ?)""",
                _sample_row(sample),
            )
        logger.debug("Stored training sample for %s", sample.action_type)

    async def append_usage_record(self, record: UsageRecord) -> None:
        async with self._write_lock, self._transaction("append") as conn:
            await conn.execute(
                """INSERT INTO usage_records (action_type, timestamp_ms, success, details)
                   VALUES (?, ?, ?, ?)""",
                _record_row(record),
            )
            await conn.execute(
                """DELETE FROM usage_records WHERE id NOT IN (
                       SELECT id FROM usage_records ORDER BY id DESC LIMIT ?
                   )""",
                (self.max_usage_records,),
            )
        logger.debug("Stored usage record for %s", record.action_type)


def _sample_row(sample: TrainingSample) -> tuple[str, str, float, str]:
    return (
        json.dumps(list(sample.features)),
        sample.action_type,
        sample.effectiveness,
        sample.created_at.isoformat(),
    )


def _record_row(record: UsageRecord) -> tuple[str, int, int, str]:
    return (
        record.action_type,
        record.timestamp_ms,
        int(record.success),
        json.dumps(record.details, default=str),
    )
