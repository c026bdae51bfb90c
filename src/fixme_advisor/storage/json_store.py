"""JSON file event store.

The whole store lives in a single JSON document that is re-read on every
call and rewritten after every mutation.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.storage.base import (
    MAX_USAGE_RECORDS,
    EventStore,
    EventStoreError,
    StoreSnapshot,
)

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "fixme-data.json"


class JSONEventStore(EventStore):
    """Event store persisted as one JSON file.

    A missing file is an empty store. An unreadable or malformed file is
    reported as ``EventStoreError``; it is never silently reset.
    """

    def __init__(self, file_path: str | Path, max_usage_records: int = MAX_USAGE_RECORDS) -> None:
        super().__init__(max_usage_records=max_usage_records)
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def read_store(self) -> StoreSnapshot:
        return await asyncio.to_thread(self._read_file)

    async def write_store(self, snapshot: StoreSnapshot) -> None:
        await asyncio.to_thread(self._write_file, snapshot)

    def _read_file(self) -> StoreSnapshot:
        if not self._file_path.exists():
            return StoreSnapshot()

        try:
            with open(self._file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise EventStoreError(f"Cannot read event store {self._file_path}: {e}") from e

        if not isinstance(data, dict):
            raise EventStoreError(f"Event store {self._file_path} is not a JSON object")

        try:
            samples = tuple(
                TrainingSample.from_dict(item) for item in data.get("training_samples", [])
            )
            records = tuple(UsageRecord.from_dict(item) for item in data.get("usage_records", []))
        except (TypeError, ValueError, AttributeError) as e:
            raise EventStoreError(f"Malformed entry in event store {self._file_path}: {e}") from e

        return StoreSnapshot(training_samples=samples, usage_records=records)

    def _write_file(self, snapshot: StoreSnapshot) -> None:
        data: dict[str, Any] = {
            "training_samples": [s.to_dict() for s in snapshot.training_samples],
            "usage_records": [r.to_dict() for r in snapshot.usage_records],
            "saved_at": datetime.now().isoformat(),
        }

        # Atomic write: write to temp file, then rename
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self._file_path.parent), suffix=".json.tmp")
        except OSError as e:
            raise EventStoreError(f"Cannot write event store {self._file_path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
            Path(tmp_path).replace(self._file_path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            raise EventStoreError(f"Cannot write event store {self._file_path}: {e}") from e
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        logger.debug(
            "Saved %d samples and %d usage records to %s",
            len(snapshot.training_samples),
            len(snapshot.usage_records),
            self._file_path,
        )
