"""Usage record written by the usage gate after an action runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class UsageRecord:
    """A single logged execution of a gated action.

    Attributes:
        action_type: Label of the action
        timestamp_ms: Wall-clock epoch milliseconds at logging time
        success: Whether the action succeeded
        details: Free-form context supplied by the caller
    """

    action_type: str
    timestamp_ms: int
    success: bool
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def local_time(self) -> datetime:
        """Timestamp as a naive local datetime."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_type": self.action_type,
            "timestamp_ms": self.timestamp_ms,
            "success": self.success,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UsageRecord:
        return cls(
            action_type=str(data.get("action_type") or data.get("type", "")),
            timestamp_ms=int(data.get("timestamp_ms", data.get("timestamp", 0))),
            success=bool(data.get("success", False)),
            details=dict(data.get("details") or {}),
        )
