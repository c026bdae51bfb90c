"""Action-type registry with per-action gating policies.

Action types are an open set of string labels as far as the predictor is
concerned, but the usage gate only knows the ones listed here (or added via
config). Anything else gets the permissive defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ActionType(StrEnum):
    """Recognized system optimization actions."""

    HIGH_PERFORMANCE = "high_performance"
    CLEAR_RAM = "clear_ram"
    PROCESS_PRIORITY = "process_priority"
    GAME_OPTIMIZATION = "game_optimization"
    DIAGNOSTICS = "diagnostico"


# Permissive defaults for labels without a configured policy
DEFAULT_COOLDOWN_MS = 0
DEFAULT_DAILY_LIMIT = 999


@dataclass(frozen=True)
class ActionPolicy:
    """Gating policy for one action type.

    Attributes:
        cooldown_ms: Minimum time between two executions
        daily_limit: Maximum executions per local calendar day
        label: Human-readable name shown in messages
    """

    cooldown_ms: int = DEFAULT_COOLDOWN_MS
    daily_limit: int = DEFAULT_DAILY_LIMIT
    label: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "cooldown_ms": self.cooldown_ms,
            "daily_limit": self.daily_limit,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: ActionPolicy | None = None) -> ActionPolicy:
        """Build a policy from a config table, falling back to ``base`` values."""
        base = base or cls()
        return cls(
            cooldown_ms=int(data.get("cooldown_ms", base.cooldown_ms)),
            daily_limit=int(data.get("daily_limit", base.daily_limit)),
            label=str(data.get("label", base.label)),
        )


DEFAULT_POLICIES: dict[str, ActionPolicy] = {
    ActionType.HIGH_PERFORMANCE: ActionPolicy(300_000, 10, "High Performance plan"),
    ActionType.CLEAR_RAM: ActionPolicy(60_000, 50, "RAM cleanup"),
    ActionType.PROCESS_PRIORITY: ActionPolicy(30_000, 20, "Process priority"),
    ActionType.GAME_OPTIMIZATION: ActionPolicy(120_000, 10, "Game optimization"),
    ActionType.DIAGNOSTICS: ActionPolicy(180_000, 20, "System diagnostics"),
}


def normalize_action_type(action_type: ActionType | str) -> str:
    """Return the plain string label for an action type."""
    if isinstance(action_type, ActionType):
        return action_type.value
    return str(action_type)


def resolve_policy(
    action_type: ActionType | str,
    policies: Mapping[str, ActionPolicy] | None = None,
) -> ActionPolicy:
    """Look up the policy for an action type.

    Unknown labels are allowed with no cooldown and an effectively
    unlimited daily quota.
    """
    table = DEFAULT_POLICIES if policies is None else policies
    key = normalize_action_type(action_type)
    policy = table.get(key)
    if policy is None:
        return ActionPolicy(label=key)
    return policy


def get_label(
    action_type: ActionType | str,
    policies: Mapping[str, ActionPolicy] | None = None,
) -> str:
    """Display label for an action type (raw label when unknown)."""
    policy = resolve_policy(action_type, policies)
    return policy.label or normalize_action_type(action_type)
