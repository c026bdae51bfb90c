"""Tests for the SQLite event store."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio

from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.storage.base import EventStoreError, StoreSnapshot
from fixme_advisor.storage.sqlite_store import SQLiteEventStore


def _sample(action_type: str = "clear_ram", effectiveness: float = 0.6) -> TrainingSample:
    return TrainingSample.create(
        (0.85, 0.7, 0.1, 0.5, 3 / 7, 0.48),
        action_type,
        effectiveness,
        created_at=datetime(2024, 6, 12, 12, 0, 0),
    )


def _record(n: int, success: bool = True) -> UsageRecord:
    return UsageRecord("clear_ram", 1_718_186_400_000 + n, success, {"n": n})


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SQLiteEventStore, None]:
    """Create a SQLite event store in a temp directory."""
    store = SQLiteEventStore(tmp_path / "events.db", max_usage_records=5)
    await store.initialize()
    yield store
    await store.close()


class TestSQLiteEventStore:
    @pytest.mark.asyncio
    async def test_empty_store(self, sqlite_store: SQLiteEventStore) -> None:
        assert await sqlite_store.read_store() == StoreSnapshot()

    @pytest.mark.asyncio
    async def test_append_and_read_in_order(self, sqlite_store: SQLiteEventStore) -> None:
        first = _sample("clear_ram", 0.9)
        second = _sample("diagnostico", 0.2)

        await sqlite_store.append_training_sample(first)
        await sqlite_store.append_training_sample(second)
        await sqlite_store.append_usage_record(_record(1, success=False))

        assert await sqlite_store.get_training_samples() == [first, second]
        records = await sqlite_store.get_usage_records()
        assert records == [_record(1, success=False)]

    @pytest.mark.asyncio
    async def test_usage_log_truncated(self, sqlite_store: SQLiteEventStore) -> None:
        for n in range(8):
            await sqlite_store.append_usage_record(_record(n))

        records = await sqlite_store.get_usage_records()
        assert [r.details["n"] for r in records] == [3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    async def test_write_store_replaces_contents(self, sqlite_store: SQLiteEventStore) -> None:
        await sqlite_store.append_training_sample(_sample())
        replacement = StoreSnapshot(
            training_samples=(_sample("game_optimization", 1.0),),
            usage_records=tuple(_record(n) for n in range(7)),
        )

        await sqlite_store.write_store(replacement)

        snapshot = await sqlite_store.read_store()
        assert [s.action_type for s in snapshot.training_samples] == ["game_optimization"]
        assert [r.details["n"] for r in snapshot.usage_records] == [2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_concurrent_appends(self, sqlite_store: SQLiteEventStore) -> None:
        await asyncio.gather(*(sqlite_store.append_training_sample(_sample()) for _ in range(10)))

        assert len(await sqlite_store.get_training_samples()) == 10

    @pytest.mark.asyncio
    async def test_data_survives_reopen(self, tmp_path: Path) -> None:
        db_path = tmp_path / "events.db"
        store = SQLiteEventStore(db_path)
        await store.initialize()
        await store.append_training_sample(_sample())
        await store.append_usage_record(_record(1))
        await store.close()

        reopened = SQLiteEventStore(db_path)
        await reopened.initialize()
        try:
            assert len(await reopened.get_training_samples()) == 1
            assert len(await reopened.get_usage_records()) == 1
        finally:
            await reopened.close()

    @pytest.mark.asyncio
    async def test_clear(self, sqlite_store: SQLiteEventStore) -> None:
        await sqlite_store.append_training_sample(_sample())
        await sqlite_store.append_usage_record(_record(1))

        await sqlite_store.clear()

        assert await sqlite_store.read_store() == StoreSnapshot()

    @pytest.mark.asyncio
    async def test_uninitialized_store_raises(self, tmp_path: Path) -> None:
        store = SQLiteEventStore(tmp_path / "events.db")

        with pytest.raises(RuntimeError, match="not initialized"):
            await store.read_store()

    @pytest.mark.asyncio
    async def test_unopenable_database_raises(self, tmp_path: Path) -> None:
        not_a_db = tmp_path / "events.db"
        not_a_db.write_bytes(b"this is definitely not a sqlite database" * 100)
        store = SQLiteEventStore(not_a_db)

        with pytest.raises(EventStoreError):
            await store.initialize()
