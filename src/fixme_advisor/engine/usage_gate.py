"""Usage gate: per action type cooldowns and daily quotas.

Two-stage check, in order:
1. cooldown since the most recent execution of the same type
2. number of executions today (local calendar day)

Only the first violated condition is reported. Only executions that the
caller chooses to log count; denied attempts are never recorded here.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fixme_advisor.core.action_type import (
    DEFAULT_POLICIES,
    ActionPolicy,
    ActionType,
    normalize_action_type,
    resolve_policy,
)
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.utils.rounding import round_percent
from fixme_advisor.utils.timeutils import (
    Clock,
    format_local_time,
    local_date_of_ms,
    local_now,
    to_epoch_ms,
)

if TYPE_CHECKING:
    from fixme_advisor.storage.base import EventStore

logger = logging.getLogger(__name__)

REASON_COOLDOWN = "cooldown"
REASON_DAILY_LIMIT = "daily_limit"

# last_used value for action types not executed today
NEVER_USED = "never"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of a can_execute() check.

    Attributes:
        allowed: Whether the action may run now
        reason: REASON_COOLDOWN or REASON_DAILY_LIMIT when denied
        remaining_seconds: Wait time left on the cooldown (ceiling)
        limit: Configured daily limit (daily_limit denials)
        remaining: Executions left today (allowed decisions)
    """

    allowed: bool
    reason: str | None = None
    remaining_seconds: int | None = None
    limit: int | None = None
    remaining: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.remaining_seconds is not None:
            data["remaining_seconds"] = self.remaining_seconds
        if self.limit is not None:
            data["limit"] = self.limit
        if self.remaining is not None:
            data["remaining"] = self.remaining
        return data


@dataclass(frozen=True)
class UsageTypeStats:
    """Usage summary for one action type."""

    today_count: int
    total_count: int
    limit: int
    success_rate: int
    last_used: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "today_count": self.today_count,
            "total_count": self.total_count,
            "limit": self.limit,
            "success_rate": self.success_rate,
            "last_used": self.last_used,
        }


class UsageGate:
    """Rate limiter backed by the usage log of the event store."""

    def __init__(
        self,
        store: EventStore,
        policies: Mapping[str, ActionPolicy] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._policies: Mapping[str, ActionPolicy] = (
            DEFAULT_POLICIES if policies is None else policies
        )
        self._clock = clock or local_now

    @property
    def policies(self) -> Mapping[str, ActionPolicy]:
        return self._policies

    def get_policy(self, action_type: ActionType | str) -> ActionPolicy:
        return resolve_policy(action_type, self._policies)

    async def can_execute(self, action_type: ActionType | str) -> GateDecision:
        """Decide whether ``action_type`` may run now."""
        key = normalize_action_type(action_type)
        policy = self.get_policy(key)
        log = await self._store.get_usage_records()
        now = self._clock()
        now_ms = to_epoch_ms(now)

        of_type = [r for r in log if r.action_type == key]

        if of_type:
            last = max(of_type, key=lambda r: r.timestamp_ms)
            elapsed = now_ms - last.timestamp_ms
            if elapsed < policy.cooldown_ms:
                remaining = math.ceil((policy.cooldown_ms - elapsed) / 1000)
                logger.debug("%s denied: cooldown, %ds left", key, remaining)
                return GateDecision(
                    allowed=False,
                    reason=REASON_COOLDOWN,
                    remaining_seconds=remaining,
                )

        today = local_date_of_ms(now_ms)
        today_count = sum(1 for r in of_type if local_date_of_ms(r.timestamp_ms) == today)

        if today_count >= policy.daily_limit:
            logger.debug("%s denied: daily limit %d reached", key, policy.daily_limit)
            return GateDecision(
                allowed=False,
                reason=REASON_DAILY_LIMIT,
                limit=policy.daily_limit,
            )

        return GateDecision(allowed=True, remaining=policy.daily_limit - today_count)

    async def log_request(
        self,
        action_type: ActionType | str,
        success: bool,
        details: Mapping[str, Any] | None = None,
    ) -> UsageRecord:
        """Append a usage record stamped with the current time.

        No gating happens here; callers check can_execute() first.
        """
        record = UsageRecord(
            action_type=normalize_action_type(action_type),
            timestamp_ms=to_epoch_ms(self._clock()),
            success=bool(success),
            details=dict(details or {}),
        )
        await self._store.append_usage_record(record)
        logger.info(
            "Logged %s (%s)", record.action_type, "success" if record.success else "failure"
        )
        return record

    async def get_usage_stats(self) -> dict[str, UsageTypeStats]:
        """Usage summary for every configured action type."""
        log = await self._store.get_usage_records()
        today = local_date_of_ms(to_epoch_ms(self._clock()))
        stats: dict[str, UsageTypeStats] = {}

        for action_type, policy in self._policies.items():
            key = normalize_action_type(action_type)
            all_requests = [r for r in log if r.action_type == key]
            today_requests = [
                r for r in all_requests if local_date_of_ms(r.timestamp_ms) == today
            ]
            successful = sum(1 for r in all_requests if r.success)

            stats[key] = UsageTypeStats(
                today_count=len(today_requests),
                total_count=len(all_requests),
                limit=policy.daily_limit,
                success_rate=(
                    round_percent(successful / len(all_requests) * 100) if all_requests else 0
                ),
                last_used=(
                    format_local_time(today_requests[-1].timestamp_ms)
                    if today_requests
                    else NEVER_USED
                ),
            )

        return stats
