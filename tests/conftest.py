"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.engine.predictor import KNNPredictor
from fixme_advisor.engine.usage_gate import UsageGate
from fixme_advisor.service import AdvisorService
from fixme_advisor.storage.memory_store import InMemoryEventStore
from fixme_advisor.unified_config import AdvisorConfig

# Wednesday noon, far from midnight and DST switches
START_TIME = datetime(2024, 6, 12, 12, 0, 0)


class FakeClock:
    """Settable clock injected wherever components read wall-clock time."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def snapshot() -> HardwareSnapshot:
    """A busy machine."""
    return HardwareSnapshot(
        cpu_percent=85.0,
        memory_percent=70.0,
        gpu_percent=10.0,
        process_count=240,
    )


@pytest.fixture
def store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def predictor(store: InMemoryEventStore, clock: FakeClock) -> KNNPredictor:
    return KNNPredictor(store, clock=clock)


@pytest.fixture
def gate(store: InMemoryEventStore, clock: FakeClock) -> UsageGate:
    return UsageGate(store, clock=clock)


@pytest.fixture
def advisor_config(tmp_path: Path) -> AdvisorConfig:
    return AdvisorConfig(data_dir=tmp_path, storage="memory")


@pytest.fixture
def service(
    store: InMemoryEventStore, advisor_config: AdvisorConfig, clock: FakeClock
) -> AdvisorService:
    return AdvisorService(store, advisor_config, clock=clock)
