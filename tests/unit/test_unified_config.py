"""Tests for the TOML configuration and the store factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from fixme_advisor.core.action_type import DEFAULT_POLICIES, ActionPolicy, ActionType
from fixme_advisor.storage.factory import create_store
from fixme_advisor.storage.json_store import JSONEventStore
from fixme_advisor.storage.memory_store import InMemoryEventStore
from fixme_advisor.storage.sqlite_store import SQLiteEventStore
from fixme_advisor.unified_config import (
    AdvisorConfig,
    PredictorSettings,
    get_advisor_dir,
)


class TestAdvisorDir:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIXME_ADVISOR_DIR", str(tmp_path))

        assert get_advisor_dir() == tmp_path

    def test_default_in_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FIXME_ADVISOR_DIR", raising=False)

        assert get_advisor_dir() == Path.home() / ".fixme-advisor"


class TestAdvisorConfig:
    def test_load_creates_default_file(self, tmp_path: Path) -> None:
        config = AdvisorConfig.load(tmp_path / "config.toml")

        assert config.config_path.exists()
        assert config.storage == "sqlite"
        assert config.predictor.k == 5
        assert config.predictor.min_samples == 3
        assert config.gate.max_usage_records == 1000
        assert config.policies[ActionType.CLEAR_RAM].cooldown_ms == 60_000

    def test_save_load_round_trip(self, tmp_path: Path) -> None:
        config = AdvisorConfig(data_dir=tmp_path, storage="json")
        config.predictor = PredictorSettings(k=7, min_samples=4)
        config.policies["clear_ram"] = ActionPolicy(1_000, 3, 'RAM "quick" cleanup')
        config.policies["defrag"] = ActionPolicy(0, 1, "Defragment")
        config.save()

        loaded = AdvisorConfig.load(tmp_path / "config.toml")

        assert loaded.storage == "json"
        assert loaded.predictor.k == 7
        assert loaded.predictor.min_samples == 4
        assert loaded.policies["clear_ram"] == ActionPolicy(1_000, 3, 'RAM "quick" cleanup')
        assert loaded.policies["defrag"].label == "Defragment"
        assert loaded.policies["diagnostico"].daily_limit == 20

    def test_partial_policy_override_keeps_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.toml").write_text(
            'storage = "memory"\n\n[policies.high_performance]\ndaily_limit = 2\n',
            encoding="utf-8",
        )

        config = AdvisorConfig.load(tmp_path / "config.toml")

        policy = config.policies["high_performance"]
        assert policy.daily_limit == 2
        assert policy.cooldown_ms == 300_000
        assert policy.label == "High Performance plan"

    def test_unknown_backend_falls_back_to_sqlite(self, tmp_path: Path) -> None:
        (tmp_path / "config.toml").write_text('storage = "redis"\n', encoding="utf-8")

        assert AdvisorConfig.load(tmp_path / "config.toml").storage == "sqlite"

    def test_invalid_policy_names_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.toml").write_text(
            '[policies."bad name"]\ndaily_limit = 1\n', encoding="utf-8"
        )

        config = AdvisorConfig.load(tmp_path / "config.toml")

        assert "bad name" not in config.policies

    def test_malformed_toml_uses_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"
        config_path.write_text('storage = \n[[[predictor\n', encoding="utf-8")

        config = AdvisorConfig.load(config_path)

        assert config.storage == "sqlite"
        assert config.predictor.k == 5
        assert config.policies == DEFAULT_POLICIES
        assert config_path.read_text(encoding="utf-8") == 'storage = \n[[[predictor\n'

    @pytest.mark.parametrize("bad", ['"soon"', "inf", "[1, 2]"])
    def test_invalid_policy_values_keep_defaults(self, tmp_path: Path, bad: str) -> None:
        (tmp_path / "config.toml").write_text(
            f"[policies.clear_ram]\ncooldown_ms = {bad}\n\n[policies.defrag]\ndaily_limit = 2\n",
            encoding="utf-8",
        )

        config = AdvisorConfig.load(tmp_path / "config.toml")

        assert config.policies["clear_ram"] == ActionPolicy(60_000, 50, "RAM cleanup")
        assert config.policies["defrag"].daily_limit == 2

    @pytest.mark.parametrize("section", ['[predictor]\nk = "many"\n', "[predictor]\nk = inf\n"])
    def test_invalid_predictor_section_keeps_defaults(self, tmp_path: Path, section: str) -> None:
        (tmp_path / "config.toml").write_text(
            f'storage = "json"\n\n{section}\n[gate]\nmax_usage_records = 10\n', encoding="utf-8"
        )

        config = AdvisorConfig.load(tmp_path / "config.toml")

        assert config.storage == "json"
        assert config.predictor.k == 5
        assert config.predictor.min_samples == 3
        assert config.gate.max_usage_records == 10

    def test_non_table_sections_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "config.toml").write_text(
            'policies = "none"\npredictor = 3\n', encoding="utf-8"
        )

        config = AdvisorConfig.load(tmp_path / "config.toml")

        assert config.policies == DEFAULT_POLICIES
        assert config.predictor.k == 5

    def test_save_rejects_unknown_backend(self, tmp_path: Path) -> None:
        config = AdvisorConfig(data_dir=tmp_path, storage="redis")

        with pytest.raises(ValueError):
            config.save()

    def test_data_paths(self, tmp_path: Path) -> None:
        config = AdvisorConfig(data_dir=tmp_path)

        assert config.sqlite_path == tmp_path / "events.db"
        assert config.json_path == tmp_path / "fixme-data.json"


class TestCreateStore:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("backend", "store_type"),
        [
            ("memory", InMemoryEventStore),
            ("json", JSONEventStore),
            ("sqlite", SQLiteEventStore),
        ],
    )
    async def test_backends(self, tmp_path: Path, backend: str, store_type: type) -> None:
        config = AdvisorConfig(data_dir=tmp_path, storage=backend)

        store = await create_store(config)
        try:
            assert isinstance(store, store_type)
            assert store.max_usage_records == 1000
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_unknown_backend(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            await create_store(AdvisorConfig(data_dir=tmp_path, storage="redis"))
