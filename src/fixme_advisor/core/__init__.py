"""Core data models."""

from fixme_advisor.core.action_type import (
    DEFAULT_POLICIES,
    ActionPolicy,
    ActionType,
    get_label,
    resolve_policy,
)
from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.core.training_sample import TrainingSample, clamp_effectiveness
from fixme_advisor.core.usage_record import UsageRecord

__all__ = [
    "ActionPolicy",
    "ActionType",
    "DEFAULT_POLICIES",
    "HardwareSnapshot",
    "TrainingSample",
    "UsageRecord",
    "clamp_effectiveness",
    "get_label",
    "resolve_policy",
]
