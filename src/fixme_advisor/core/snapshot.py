"""Hardware state snapshot consumed by the feature extractor."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def _coerce_number(value: Any) -> float:
    """Convert a telemetry value to float, treating anything unusable as 0."""
    if isinstance(value, Mapping):
        value = value.get("current")
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class HardwareSnapshot:
    """Point-in-time hardware utilization reported by the telemetry collaborator.

    Attributes:
        cpu_percent: CPU utilization (0-100)
        memory_percent: Memory utilization (0-100)
        gpu_percent: GPU utilization (0-100)
        process_count: Number of running processes
    """

    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    gpu_percent: float = 0.0
    process_count: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> HardwareSnapshot:
        """Parse a snapshot from either the flat or the nested telemetry shape.

        Nested values look like ``{"cpu": {"current": 42.0}}``. Missing or
        malformed or non-finite fields become 0.
        """
        if not data:
            return cls()
        return cls(
            cpu_percent=_coerce_number(_first_present(data, "cpu_percent", "cpu")),
            memory_percent=_coerce_number(_first_present(data, "memory_percent", "memory")),
            gpu_percent=_coerce_number(_first_present(data, "gpu_percent", "gpu")),
            process_count=_coerce_number(
                _first_present(data, "process_count", "processCount", "processes")
            ),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "cpu_percent": self.cpu_percent,
            "memory_percent": self.memory_percent,
            "gpu_percent": self.gpu_percent,
            "process_count": self.process_count,
        }
