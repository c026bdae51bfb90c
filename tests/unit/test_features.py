"""Tests for feature extraction from hardware snapshots."""

from __future__ import annotations

from datetime import datetime

import pytest

from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.engine.features import FEATURE_COUNT, FEATURE_NAMES, extract_features

# Wednesday 18:00
EVENING = datetime(2024, 6, 12, 18, 0, 0)


class TestExtractFeatures:
    """Vector layout and scaling."""

    def test_documented_order_and_scaling(self) -> None:
        snapshot = HardwareSnapshot(
            cpu_percent=50, memory_percent=25, gpu_percent=80, process_count=250
        )

        features = extract_features(snapshot, now=EVENING)

        assert features == pytest.approx((0.5, 0.25, 0.8, 0.75, 3 / 7, 0.5))
        assert len(features) == FEATURE_COUNT == len(FEATURE_NAMES)

    def test_sunday_is_day_zero(self) -> None:
        sunday = datetime(2024, 6, 16, 0, 0, 0)

        features = extract_features(HardwareSnapshot(), now=sunday)

        assert features[3] == 0.0
        assert features[4] == 0.0

    def test_saturday_is_day_six(self) -> None:
        saturday = datetime(2024, 6, 15, 23, 0, 0)

        features = extract_features(HardwareSnapshot(), now=saturday)

        assert features[3] == pytest.approx(23 / 24)
        assert features[4] == pytest.approx(6 / 7)

    def test_deterministic_for_fixed_time(self) -> None:
        snapshot = HardwareSnapshot(cpu_percent=12.5, process_count=99)

        assert extract_features(snapshot, now=EVENING) == extract_features(snapshot, now=EVENING)

    def test_missing_snapshot_counts_as_zero(self) -> None:
        features = extract_features(None, now=EVENING)

        assert features[:3] == (0.0, 0.0, 0.0)
        assert features[5] == 0.0

    def test_nested_telemetry_shape(self) -> None:
        nested = {
            "cpu": {"current": 50},
            "memory": {"current": 25},
            "gpu": {"current": 80},
            "processes": 250,
        }
        flat = HardwareSnapshot(
            cpu_percent=50, memory_percent=25, gpu_percent=80, process_count=250
        )

        assert extract_features(nested, now=EVENING) == extract_features(flat, now=EVENING)

    def test_process_count_is_not_clamped(self) -> None:
        features = extract_features(HardwareSnapshot(process_count=750), now=EVENING)

        assert features[5] == pytest.approx(1.5)
