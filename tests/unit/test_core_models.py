"""Tests for snapshots, action policies, samples, records and rounding."""

from __future__ import annotations

from datetime import datetime

import pytest

from fixme_advisor.core.action_type import (
    DEFAULT_COOLDOWN_MS,
    DEFAULT_DAILY_LIMIT,
    DEFAULT_POLICIES,
    ActionPolicy,
    ActionType,
    get_label,
    normalize_action_type,
    resolve_policy,
)
from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.core.training_sample import TrainingSample, clamp_effectiveness
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.utils.rounding import round_half_up, round_percent


class TestHardwareSnapshot:
    def test_flat_shape(self) -> None:
        snapshot = HardwareSnapshot.from_dict(
            {"cpu_percent": 10, "memory_percent": 20, "gpu_percent": 30, "process_count": 40}
        )

        assert snapshot == HardwareSnapshot(10.0, 20.0, 30.0, 40.0)

    def test_aliases(self) -> None:
        snapshot = HardwareSnapshot.from_dict({"cpu": 5, "memory": 6, "processCount": 7})

        assert snapshot.cpu_percent == 5.0
        assert snapshot.memory_percent == 6.0
        assert snapshot.gpu_percent == 0.0
        assert snapshot.process_count == 7.0

    @pytest.mark.parametrize(
        "bad",
        [None, "abc", True, float("nan"), float("inf"), "inf", "-Infinity", {"current": None}, []],
    )
    def test_unusable_values_become_zero(self, bad: object) -> None:
        snapshot = HardwareSnapshot.from_dict({"cpu_percent": bad})

        assert snapshot.cpu_percent == 0.0

    def test_huge_finite_value_kept(self) -> None:
        assert HardwareSnapshot.from_dict({"cpu": {"current": "1e300"}}).cpu_percent == 1e300

    def test_empty_input(self) -> None:
        assert HardwareSnapshot.from_dict(None) == HardwareSnapshot()
        assert HardwareSnapshot.from_dict({}) == HardwareSnapshot()

    def test_to_dict_round_trips(self) -> None:
        snapshot = HardwareSnapshot(1.0, 2.0, 3.0, 4.0)

        assert HardwareSnapshot.from_dict(snapshot.to_dict()) == snapshot


class TestActionPolicies:
    def test_default_table(self) -> None:
        clear_ram = DEFAULT_POLICIES[ActionType.CLEAR_RAM]

        assert clear_ram.cooldown_ms == 60_000
        assert clear_ram.daily_limit == 50
        assert DEFAULT_POLICIES[ActionType.HIGH_PERFORMANCE].cooldown_ms == 300_000
        assert DEFAULT_POLICIES[ActionType.DIAGNOSTICS].daily_limit == 20

    def test_plain_string_lookup(self) -> None:
        assert resolve_policy("process_priority") == DEFAULT_POLICIES[ActionType.PROCESS_PRIORITY]

    def test_unknown_type_is_permissive(self) -> None:
        policy = resolve_policy("defrag")

        assert policy.cooldown_ms == DEFAULT_COOLDOWN_MS == 0
        assert policy.daily_limit == DEFAULT_DAILY_LIMIT == 999

    def test_labels(self) -> None:
        assert get_label(ActionType.CLEAR_RAM) == "RAM cleanup"
        assert get_label("defrag") == "defrag"

    def test_normalize(self) -> None:
        assert normalize_action_type(ActionType.DIAGNOSTICS) == "diagnostico"
        assert type(normalize_action_type(ActionType.CLEAR_RAM)) is str

    def test_from_dict_overlays_base(self) -> None:
        base = ActionPolicy(60_000, 50, "RAM cleanup")

        policy = ActionPolicy.from_dict({"daily_limit": 5}, base=base)

        assert policy == ActionPolicy(60_000, 5, "RAM cleanup")


class TestTrainingSample:
    @pytest.mark.parametrize(("raw", "expected"), [(1.3, 1.0), (-0.5, 0.0), (0.42, 0.42)])
    def test_clamp(self, raw: float, expected: float) -> None:
        assert clamp_effectiveness(raw) == expected

    def test_create_clamps(self) -> None:
        sample = TrainingSample.create((0.1,) * 6, "clear_ram", 7.0)

        assert sample.effectiveness == 1.0

    def test_from_dict_accepts_legacy_keys(self) -> None:
        sample = TrainingSample.from_dict(
            {
                "features": [0.1, 0.2],
                "optimization_type": "clear_ram",
                "effectiveness": 0.6,
                "timestamp": "2024-06-12T12:00:00",
            }
        )

        assert sample.action_type == "clear_ram"
        assert sample.features == (0.1, 0.2)
        assert sample.created_at == datetime(2024, 6, 12, 12, 0, 0)

    def test_dict_round_trip(self) -> None:
        sample = TrainingSample.create(
            (0.5, 0.25), "game_optimization", 0.8, created_at=datetime(2024, 1, 2, 3, 4, 5)
        )

        assert TrainingSample.from_dict(sample.to_dict()) == sample


class TestUsageRecord:
    def test_from_dict_accepts_legacy_keys(self) -> None:
        record = UsageRecord.from_dict({"type": "clear_ram", "timestamp": 1000, "success": True})

        assert record.action_type == "clear_ram"
        assert record.timestamp_ms == 1000
        assert record.details == {}

    def test_local_time(self) -> None:
        moment = datetime(2024, 6, 12, 12, 0, 0)
        record = UsageRecord("clear_ram", int(moment.timestamp() * 1000), True)

        assert record.local_time == moment


class TestRounding:
    def test_ties_round_up(self) -> None:
        assert round_half_up(2.5) == 3.0
        assert round_half_up(0.125, 2) == 0.13
        assert round_percent(40.0) == 40
        assert round_percent(66.5) == 67

    def test_regular_rounding(self) -> None:
        assert round_half_up(0.6333, 2) == 0.63
        assert round_percent(33.3) == 33
