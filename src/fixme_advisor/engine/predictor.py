"""k-nearest-neighbor predictor for optimization recommendations.

Learns from every executed optimization and predicts which action type
is likely to be most effective for the current hardware state.

Scoring per action type among the k nearest samples:
- weight of a neighbor = 1 / (distance + 0.001)
- score = weighted mean effectiveness
- confidence = share of the k votes the type received (distance ignored)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fixme_advisor.core.action_type import (
    ActionPolicy,
    ActionType,
    get_label,
    normalize_action_type,
)
from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.engine.features import SnapshotLike, extract_features
from fixme_advisor.utils.rounding import round_half_up, round_percent
from fixme_advisor.utils.timeutils import Clock, local_now

if TYPE_CHECKING:
    from fixme_advisor.storage.base import EventStore

logger = logging.getLogger(__name__)

DEFAULT_K = 5

# Below this many samples no prediction is attempted
MIN_SAMPLES = 3

# Keeps an exact feature match from dividing by zero
DISTANCE_EPSILON = 0.001

INSUFFICIENT_DATA_MESSAGE = (
    "Insufficient data for prediction. Keep running optimizations to feed the model."
)
NO_PREDICTION_MESSAGE = "No prediction available"


@dataclass(frozen=True)
class Prediction:
    """Ranked recommendation for one action type.

    Attributes:
        action_type: The recommended action
        score: Inverse-distance weighted effectiveness, 2 decimals
        confidence: Percentage of the k nearest votes for this type
    """

    action_type: str
    score: float
    confidence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.action_type,
            "score": self.score,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class PredictionResult:
    """Output of a predict() call."""

    predictions: list[Prediction] = field(default_factory=list)
    confidence: int = 0
    message: str = NO_PREDICTION_MESSAGE

    @property
    def top(self) -> Prediction | None:
        return self.predictions[0] if self.predictions else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "predictions": [p.to_dict() for p in self.predictions],
            "confidence": self.confidence,
            "message": self.message,
        }


@dataclass(frozen=True)
class ModelStats:
    """Summary of the training set."""

    total_samples: int
    type_counts: dict[str, int]
    avg_effectiveness: float
    is_ready: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_samples": self.total_samples,
            "type_counts": dict(self.type_counts),
            "avg_effectiveness": self.avg_effectiveness,
            "is_ready": self.is_ready,
        }


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Distance over the components of ``a``; missing components of ``b`` count as 0.

    Never overflows: huge or non-finite components give ``math.inf``.
    """
    padded = [b[i] if i < len(b) else 0.0 for i in range(len(a))]
    distance = math.dist(a, padded)
    return distance if math.isfinite(distance) else math.inf


@dataclass
class _TypeScore:
    total: float = 0.0
    weight_sum: float = 0.0
    count: int = 0


class KNNPredictor:
    """Distance-weighted kNN over the persisted training samples.

    The event store is the source of truth: every predict() and
    get_model_stats() call reloads the full training set, and the
    in-process list is only a cache of the last load.
    """

    def __init__(
        self,
        store: EventStore,
        k: int = DEFAULT_K,
        min_samples: int = MIN_SAMPLES,
        policies: Mapping[str, ActionPolicy] | None = None,
        clock: Clock | None = None,
    ) -> None:
        if k < 1:
            raise ValueError("k must be at least 1")
        self._store = store
        self._k = k
        self._min_samples = min_samples
        self._policies = policies
        self._clock = clock or local_now
        self._training_data: list[TrainingSample] = []

    @property
    def k(self) -> int:
        return self._k

    @property
    def min_samples(self) -> int:
        return self._min_samples

    @property
    def training_data(self) -> list[TrainingSample]:
        """Samples from the last reload plus any trained since."""
        return list(self._training_data)

    async def load_training_data(self) -> list[TrainingSample]:
        """Refresh the cache from the event store."""
        self._training_data = await self._store.get_training_samples()
        return self._training_data

    def extract_features(self, snapshot: SnapshotLike) -> tuple[float, ...]:
        return extract_features(snapshot, now=self._clock())

    async def predict(self, snapshot: SnapshotLike) -> PredictionResult:
        """Rank action types by expected effectiveness for ``snapshot``."""
        features = self.extract_features(snapshot)
        samples = await self.load_training_data()

        if len(samples) < self._min_samples:
            logger.debug("Only %d training samples, skipping prediction", len(samples))
            return PredictionResult(
                predictions=[],
                confidence=0,
                message=INSUFFICIENT_DATA_MESSAGE,
            )

        distances = [(euclidean_distance(features, s.features), s) for s in samples]
        # Stable sort: ties keep training-set order
        distances.sort(key=lambda pair: pair[0])
        nearest = distances[: min(self._k, len(distances))]

        type_scores: dict[str, _TypeScore] = {}
        for dist, sample in nearest:
            score = type_scores.setdefault(sample.action_type, _TypeScore())
            weight = 1 / (dist + DISTANCE_EPSILON)
            score.total += sample.effectiveness * weight
            score.weight_sum += weight
            score.count += 1

        predictions = sorted(
            (
                Prediction(
                    action_type=action_type,
                    score=round_half_up(s.total / s.weight_sum, 2) if s.weight_sum else 0.0,
                    confidence=round_percent(min(s.count / self._k, 1) * 100),
                )
                for action_type, s in type_scores.items()
            ),
            key=lambda p: p.score,
            reverse=True,
        )

        if not predictions:
            return PredictionResult(predictions=[], confidence=0, message=NO_PREDICTION_MESSAGE)

        top = predictions[0]
        logger.debug(
            "Predicted %s (score %.2f) from %d neighbors", top.action_type, top.score, len(nearest)
        )
        return PredictionResult(
            predictions=predictions,
            confidence=top.confidence,
            message=(
                f"ML recommends: {get_label(top.action_type, self._policies)} "
                f"(confidence {top.confidence}%)"
            ),
        )

    async def train(
        self,
        snapshot: SnapshotLike,
        action_type: ActionType | str,
        effectiveness: float,
    ) -> TrainingSample:
        """Record a new training sample for the current hardware state.

        Effectiveness is clamped into [0, 1].
        """
        sample = TrainingSample.create(
            features=self.extract_features(snapshot),
            action_type=normalize_action_type(action_type),
            effectiveness=effectiveness,
            created_at=self._clock(),
        )
        await self._store.append_training_sample(sample)
        self._training_data.append(sample)
        logger.info(
            "Trained %s with effectiveness %.2f", sample.action_type, sample.effectiveness
        )
        return sample

    async def get_model_stats(self) -> ModelStats:
        samples = await self.load_training_data()

        type_counts: dict[str, int] = {}
        for sample in samples:
            type_counts[sample.action_type] = type_counts.get(sample.action_type, 0) + 1

        avg = sum(s.effectiveness for s in samples) / len(samples) if samples else 0.0

        return ModelStats(
            total_samples=len(samples),
            type_counts=type_counts,
            avg_effectiveness=round_half_up(avg, 2),
            is_ready=len(samples) >= self._min_samples,
        )
