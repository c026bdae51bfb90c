"""Event store backends for fixme-advisor."""

from fixme_advisor.storage.base import (
    MAX_USAGE_RECORDS,
    EventStore,
    EventStoreError,
    StoreSnapshot,
)
from fixme_advisor.storage.factory import create_store
from fixme_advisor.storage.json_store import JSONEventStore
from fixme_advisor.storage.memory_store import InMemoryEventStore
from fixme_advisor.storage.sqlite_store import SQLiteEventStore

__all__ = [
    "MAX_USAGE_RECORDS",
    "EventStore",
    "EventStoreError",
    "InMemoryEventStore",
    "JSONEventStore",
    "SQLiteEventStore",
    "StoreSnapshot",
    "create_store",
]
