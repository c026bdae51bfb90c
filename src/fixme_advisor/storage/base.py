"""Abstract base class for event store backends."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord

logger = logging.getLogger(__name__)

# Usage log keeps only the most recent records; training samples are unbounded
MAX_USAGE_RECORDS = 1000


class EventStoreError(Exception):
    """Raised when the persisted event log cannot be read or written."""


@dataclass(frozen=True)
class StoreSnapshot:
    """Full contents of the event store.

    Attributes:
        training_samples: Every training sample ever recorded, oldest first
        usage_records: Most recent usage records, oldest first
    """

    training_samples: tuple[TrainingSample, ...] = field(default_factory=tuple)
    usage_records: tuple[UsageRecord, ...] = field(default_factory=tuple)

    def with_training_sample(self, sample: TrainingSample) -> StoreSnapshot:
        return StoreSnapshot(
            training_samples=(*self.training_samples, sample),
            usage_records=self.usage_records,
        )

    def with_usage_record(
        self,
        record: UsageRecord,
        max_records: int = MAX_USAGE_RECORDS,
    ) -> StoreSnapshot:
        """Append a usage record, evicting the oldest beyond ``max_records``."""
        records = (*self.usage_records, record)
        if len(records) > max_records:
            records = records[len(records) - max_records :]
        return StoreSnapshot(
            training_samples=self.training_samples,
            usage_records=records,
        )


class EventStore(ABC):
    """
    Append-only event log shared by the predictor and the usage gate.

    Backends implement the full-snapshot ``read_store``/``write_store``
    contract. Appends are read-modify-write cycles serialized by a lock,
    so one store instance can be shared by concurrent tasks.
    """

    def __init__(self, max_usage_records: int = MAX_USAGE_RECORDS) -> None:
        if max_usage_records < 1:
            raise ValueError("max_usage_records must be at least 1")
        self._max_usage_records = max_usage_records
        self._write_lock = asyncio.Lock()

    @property
    def max_usage_records(self) -> int:
        return self._max_usage_records

    # ========== Snapshot Contract ==========

    @abstractmethod
    async def read_store(self) -> StoreSnapshot:
        """
        Read the complete store.

        Raises:
            EventStoreError: If the persisted data cannot be read
        """
        ...

    @abstractmethod
    async def write_store(self, snapshot: StoreSnapshot) -> None:
        """
        Overwrite the complete store.

        Raises:
            EventStoreError: If the data cannot be persisted
        """
        ...

    # ========== Appends ==========

    async def append_training_sample(self, sample: TrainingSample) -> None:
        """Append a training sample and persist the store."""
        async with self._write_lock:
            snapshot = await self.read_store()
            await self.write_store(snapshot.with_training_sample(sample))
        logger.debug("Stored training sample for %s", sample.action_type)

    async def append_usage_record(self, record: UsageRecord) -> None:
        """Append a usage record, truncating the log before persisting."""
        async with self._write_lock:
            snapshot = await self.read_store()
            await self.write_store(
                snapshot.with_usage_record(record, self._max_usage_records)
            )
        logger.debug("Stored usage record for %s", record.action_type)

    # ========== Reads ==========

    async def get_training_samples(self) -> list[TrainingSample]:
        snapshot = await self.read_store()
        return list(snapshot.training_samples)

    async def get_usage_records(self) -> list[UsageRecord]:
        snapshot = await self.read_store()
        return list(snapshot.usage_records)

    # ========== Lifecycle ==========

    async def clear(self) -> None:
        """Remove every training sample and usage record."""
        async with self._write_lock:
            await self.write_store(StoreSnapshot())

    async def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""
