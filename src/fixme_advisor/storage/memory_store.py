"""In-memory event store for development and testing."""

from __future__ import annotations

from fixme_advisor.storage.base import MAX_USAGE_RECORDS, EventStore, StoreSnapshot


class InMemoryEventStore(EventStore):
    """Event store held in process memory.

    Data is lost when the process exits.
    """

    def __init__(
        self,
        snapshot: StoreSnapshot | None = None,
        max_usage_records: int = MAX_USAGE_RECORDS,
    ) -> None:
        super().__init__(max_usage_records=max_usage_records)
        self._snapshot = snapshot or StoreSnapshot()

    async def read_store(self) -> StoreSnapshot:
        return self._snapshot

    async def write_store(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot
