"""Event store factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fixme_advisor.storage.base import EventStore
from fixme_advisor.storage.json_store import JSONEventStore
from fixme_advisor.storage.memory_store import InMemoryEventStore
from fixme_advisor.storage.sqlite_store import SQLiteEventStore

if TYPE_CHECKING:
    from fixme_advisor.unified_config import AdvisorConfig

logger = logging.getLogger(__name__)


async def create_store(config: AdvisorConfig) -> EventStore:
    """Create and open the event store selected by ``config.storage``.

    Args:
        config: Advisor configuration

    Returns:
        Ready-to-use EventStore

    Raises:
        ValueError: If the backend name is unknown
        EventStoreError: If the backend cannot be opened
    """
    max_records = config.gate.max_usage_records

    if config.storage == "memory":
        logger.debug("Using in-memory event store")
        return InMemoryEventStore(max_usage_records=max_records)

    if config.storage == "json":
        logger.debug("Using JSON event store at %s", config.json_path)
        return JSONEventStore(config.json_path, max_usage_records=max_records)

    if config.storage == "sqlite":
        store = SQLiteEventStore(config.sqlite_path, max_usage_records=max_records)
        await store.initialize()
        return store

    raise ValueError(f"Unknown storage backend: {config.storage}")
