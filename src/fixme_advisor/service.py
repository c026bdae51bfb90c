"""Advisor service: one event store wired into predictor, gate and trainer.

This is the surface the UI/orchestration layer talks to. A typical gated
action goes through run_gated(): check the gate, run the action, log the
outcome, feed a training sample back to the predictor.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from fixme_advisor.core.action_type import ActionPolicy, ActionType, normalize_action_type
from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.engine.features import SnapshotLike
from fixme_advisor.engine.predictor import KNNPredictor, ModelStats, PredictionResult
from fixme_advisor.engine.trainer import Trainer
from fixme_advisor.engine.usage_gate import (
    REASON_COOLDOWN,
    GateDecision,
    UsageGate,
    UsageTypeStats,
)
from fixme_advisor.storage.base import EventStore, EventStoreError
from fixme_advisor.unified_config import AdvisorConfig
from fixme_advisor.utils.timeutils import Clock

logger = logging.getLogger(__name__)


def blocked_message(decision: GateDecision) -> str:
    """Human-readable explanation for a denied gate decision."""
    if decision.reason == REASON_COOLDOWN:
        return f"Wait {decision.remaining_seconds}s before using this again"
    return "Daily limit reached"


@dataclass(frozen=True)
class ActionOutcome:
    """Result of a gated action run.

    Attributes:
        success: Whether the action was allowed and completed
        decision: The gate decision taken before running
        result: Return value of the action when it succeeded
        error: Blocked message or error text otherwise
    """

    success: bool
    decision: GateDecision
    result: Any = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "gate": self.decision.to_dict()}
        if self.success:
            data["out"] = self.result
        else:
            data["error"] = self.error
        return data


class AdvisorService:
    """Facade over the recommendation and gating components."""

    def __init__(
        self,
        store: EventStore,
        config: AdvisorConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        config = config or AdvisorConfig()
        self._store = store
        self._config = config
        self._policies: Mapping[str, ActionPolicy] = config.policies
        self.predictor = KNNPredictor(
            store,
            k=config.predictor.k,
            min_samples=config.predictor.min_samples,
            policies=self._policies,
            clock=clock,
        )
        self.gate = UsageGate(store, policies=self._policies, clock=clock)
        self.trainer = Trainer(self.predictor)

    @property
    def store(self) -> EventStore:
        return self._store

    @property
    def policies(self) -> Mapping[str, ActionPolicy]:
        return self._policies

    # ========== Predictor ==========

    def extract_features(self, snapshot: SnapshotLike) -> tuple[float, ...]:
        return self.predictor.extract_features(snapshot)

    async def predict(self, snapshot: SnapshotLike) -> PredictionResult:
        return await self.predictor.predict(snapshot)

    async def train(
        self,
        snapshot: SnapshotLike,
        action_type: ActionType | str,
        effectiveness: float,
    ) -> TrainingSample:
        return await self.predictor.train(snapshot, action_type, effectiveness)

    async def get_model_stats(self) -> ModelStats:
        return await self.predictor.get_model_stats()

    async def record_feedback(
        self,
        snapshot: SnapshotLike,
        action_type: ActionType | str,
        rating: int,
    ) -> TrainingSample:
        return await self.trainer.record_feedback(snapshot, action_type, rating)

    # ========== Usage Gate ==========

    async def can_execute(self, action_type: ActionType | str) -> GateDecision:
        return await self.gate.can_execute(action_type)

    async def log_request(
        self,
        action_type: ActionType | str,
        success: bool,
        details: Mapping[str, Any] | None = None,
    ) -> UsageRecord:
        return await self.gate.log_request(action_type, success, details)

    async def get_usage_stats(self) -> dict[str, UsageTypeStats]:
        return await self.gate.get_usage_stats()

    # ========== Gated Execution ==========

    async def run_gated(
        self,
        action_type: ActionType | str,
        action: Callable[[], Awaitable[Any]],
        snapshot: SnapshotLike = None,
        train: bool = True,
    ) -> ActionOutcome:
        """Run ``action`` if the gate allows it, then log and learn from the outcome.

        Denied attempts are returned as failed outcomes and are not logged.
        Exceptions raised by ``action`` are logged as failures and reported
        in the outcome. Store failures propagate.

        Args:
            action_type: Gated action label
            action: Zero-argument coroutine function performing the work
            snapshot: Hardware state to train with after success
            train: Whether to add a training sample after success
        """
        key = normalize_action_type(action_type)
        decision = await self.gate.can_execute(key)
        if not decision.allowed:
            message = blocked_message(decision)
            logger.warning("%s blocked: %s", key, message)
            return ActionOutcome(success=False, decision=decision, error=message)

        try:
            result = await action()
        except EventStoreError:
            raise
        except Exception as e:
            logger.warning("%s failed: %s", key, e, exc_info=True)
            await self.gate.log_request(key, False, {"error": str(e)})
            return ActionOutcome(success=False, decision=decision, error=str(e))

        await self.gate.log_request(key, True)
        if train:
            await self.trainer.record_outcome(snapshot, key, True)
        return ActionOutcome(success=True, decision=decision, result=result)

    async def close(self) -> None:
        await self._store.close()
