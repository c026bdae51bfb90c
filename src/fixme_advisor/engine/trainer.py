"""Feedback loop that turns action outcomes and user ratings into training samples."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fixme_advisor.core.action_type import ActionType

if TYPE_CHECKING:
    from fixme_advisor.core.training_sample import TrainingSample
    from fixme_advisor.engine.features import SnapshotLike
    from fixme_advisor.engine.predictor import KNNPredictor

logger = logging.getLogger(__name__)

# Default effectiveness when no explicit feedback is given
SUCCESS_EFFECTIVENESS = 0.6
FAILURE_EFFECTIVENESS = 0.2

MIN_RATING = 1
MAX_RATING = 5


def outcome_effectiveness(success: bool) -> float:
    return SUCCESS_EFFECTIVENESS if success else FAILURE_EFFECTIVENESS


def rating_to_effectiveness(rating: int) -> float:
    """Map a 1-5 user rating onto [0, 1] via ``(rating - 1) / 4``.

    Raises:
        ValueError: If the rating is outside 1-5
    """
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return (rating - MIN_RATING) / (MAX_RATING - MIN_RATING)


class Trainer:
    """Appends training samples when actions complete or get rated."""

    def __init__(self, predictor: KNNPredictor) -> None:
        self._predictor = predictor

    async def record_outcome(
        self,
        snapshot: SnapshotLike,
        action_type: ActionType | str,
        success: bool,
    ) -> TrainingSample:
        """Train with the default effectiveness for a completed action."""
        return await self._predictor.train(snapshot, action_type, outcome_effectiveness(success))

    async def record_feedback(
        self,
        snapshot: SnapshotLike,
        action_type: ActionType | str,
        rating: int,
    ) -> TrainingSample:
        """Train with the effectiveness derived from an explicit user rating."""
        effectiveness = rating_to_effectiveness(rating)
        logger.debug("Feedback rating %d for %s", rating, action_type)
        return await self._predictor.train(snapshot, action_type, effectiveness)
