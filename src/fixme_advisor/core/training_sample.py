"""Training sample for the kNN predictor."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def clamp_effectiveness(value: float) -> float:
    """Clamp an effectiveness value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class TrainingSample:
    """One observation of how well an action worked in a given hardware state.

    Attributes:
        features: Feature vector extracted when the action ran
        action_type: Label of the action
        effectiveness: Outcome score in [0, 1]
        created_at: When the sample was recorded
    """

    features: tuple[float, ...]
    action_type: str
    effectiveness: float
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        features: Sequence[float],
        action_type: str,
        effectiveness: float,
        created_at: datetime | None = None,
    ) -> TrainingSample:
        """Create a sample, clamping effectiveness into [0, 1]."""
        return cls(
            features=tuple(float(f) for f in features),
            action_type=action_type,
            effectiveness=clamp_effectiveness(effectiveness),
            created_at=created_at or datetime.now(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "features": list(self.features),
            "action_type": self.action_type,
            "effectiveness": self.effectiveness,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrainingSample:
        created_raw = data.get("created_at") or data.get("timestamp")
        return cls.create(
            features=data.get("features", ()),
            action_type=str(data.get("action_type") or data.get("optimization_type", "")),
            effectiveness=float(data.get("effectiveness", 0.0)),
            created_at=datetime.fromisoformat(created_raw) if created_raw else None,
        )
