"""Feature extraction from hardware snapshots.

Vector layout (positions are significant, every consumer relies on it):

    0  cpu_percent / 100
    1  memory_percent / 100
    2  gpu_percent / 100
    3  hour of day / 24
    4  day of week (Sunday = 0) / 7
    5  process_count / 500

Values are not clamped; a machine with more than 500 processes yields a
last component above 1.0. Non-finite components become 0.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.utils.timeutils import js_weekday

FEATURE_COUNT = 6
PROCESS_COUNT_SCALE = 500

FEATURE_NAMES: tuple[str, ...] = (
    "cpu",
    "memory",
    "gpu",
    "hour",
    "weekday",
    "processes",
)

SnapshotLike = HardwareSnapshot | Mapping[str, Any] | None


def as_snapshot(snapshot: SnapshotLike) -> HardwareSnapshot:
    """Coerce a mapping or None into a HardwareSnapshot."""
    if isinstance(snapshot, HardwareSnapshot):
        return snapshot
    return HardwareSnapshot.from_dict(snapshot)


def extract_features(snapshot: SnapshotLike, now: datetime | None = None) -> tuple[float, ...]:
    """Turn a hardware snapshot into the 6-component feature vector.

    Args:
        snapshot: Hardware state (missing fields count as 0)
        now: Wall-clock time for the hour/weekday components (default: now)

    Returns:
        Tuple of FEATURE_COUNT floats
    """
    hw = as_snapshot(snapshot)
    moment = now or datetime.now()
    vector = (
        hw.cpu_percent / 100,
        hw.memory_percent / 100,
        hw.gpu_percent / 100,
        moment.hour / 24,
        js_weekday(moment) / 7,
        hw.process_count / PROCESS_COUNT_SCALE,
    )
    return tuple(v if math.isfinite(v) else 0.0 for v in vector)
