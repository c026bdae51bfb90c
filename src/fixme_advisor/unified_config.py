"""Unified configuration for fixme-advisor.

Shared by the CLI and the HTTP bridge.

Configuration is stored in ~/.fixme-advisor/config.toml
Event data is stored in ~/.fixme-advisor/events.db (SQLite) or
~/.fixme-advisor/fixme-data.json (JSON backend).
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from fixme_advisor.core.action_type import DEFAULT_POLICIES, ActionPolicy
from fixme_advisor.storage.json_store import DEFAULT_FILENAME as JSON_FILENAME

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sqlite", "json", "memory")

# Policy keys end up as bare TOML table names
_ACTION_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_\-]+$")


def get_advisor_dir() -> Path:
    """Get fixme-advisor data directory.

    Priority:
    1. FIXME_ADVISOR_DIR environment variable
    2. ~/.fixme-advisor/
    """
    env_dir = os.environ.get("FIXME_ADVISOR_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".fixme-advisor"


@dataclass
class PredictorSettings:
    """Settings for the kNN predictor."""

    k: int = 5
    min_samples: int = 3

    def to_dict(self) -> dict[str, Any]:
        return {"k": self.k, "min_samples": self.min_samples}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PredictorSettings:
        return cls(
            k=max(1, int(data.get("k", 5))),
            min_samples=max(1, int(data.get("min_samples", 3))),
        )


@dataclass
class GateSettings:
    """Settings for the usage gate and its log."""

    max_usage_records: int = 1000

    def to_dict(self) -> dict[str, Any]:
        return {"max_usage_records": self.max_usage_records}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GateSettings:
        return cls(max_usage_records=max(1, int(data.get("max_usage_records", 1000))))


def _merge_policies(overrides: dict[str, Any]) -> dict[str, ActionPolicy]:
    """Overlay ``[policies.<action>]`` tables on the default policy table."""
    policies = dict(DEFAULT_POLICIES)
    for name, table in overrides.items():
        if not _ACTION_NAME_PATTERN.match(name) or not isinstance(table, dict):
            logger.warning("Ignoring invalid policy entry: %r", name)
            continue
        base = policies.get(name, ActionPolicy(label=name))
        try:
            policies[name] = ActionPolicy.from_dict(table, base=base)
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Ignoring policy %r with invalid values: %s", name, e)
    return policies


_S = TypeVar("_S", PredictorSettings, GateSettings)


def _load_section(data: dict[str, Any], key: str, settings_cls: type[_S]) -> _S:
    """Parse one settings table, keeping defaults when it is malformed."""
    table = data.get(key, {})
    if not isinstance(table, dict):
        logger.warning("Ignoring invalid [%s] section", key)
        return settings_cls()
    try:
        return settings_cls.from_dict(table)
    except (TypeError, ValueError, OverflowError) as e:
        logger.warning("Ignoring [%s] section with invalid values: %s", key, e)
        return settings_cls()


@dataclass
class AdvisorConfig:
    """Configuration for fixme-advisor.

    Storage location: ~/.fixme-advisor/config.toml
    """

    # Base directory for all data
    data_dir: Path = field(default_factory=get_advisor_dir)

    # Event store backend: sqlite, json or memory
    storage: str = "sqlite"

    predictor: PredictorSettings = field(default_factory=PredictorSettings)
    gate: GateSettings = field(default_factory=GateSettings)

    # Gating policy per action type
    policies: dict[str, ActionPolicy] = field(default_factory=lambda: dict(DEFAULT_POLICIES))

    version: str = "1.0"

    @classmethod
    def load(cls, config_path: Path | None = None) -> AdvisorConfig:
        """Load configuration from file, or create default if doesn't exist."""
        if config_path is None:
            data_dir = get_advisor_dir()
            config_path = data_dir / "config.toml"
        else:
            data_dir = config_path.parent

        if not config_path.exists():
            config = cls(data_dir=data_dir)
            config.save()
            return config

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.warning("Cannot parse %s, using defaults: %s", config_path, e)
            return cls(data_dir=data_dir)

        storage = data.get("storage", "sqlite")
        if storage not in STORAGE_BACKENDS:
            logger.warning("Unknown storage backend %r, using sqlite", storage)
            storage = "sqlite"

        policies = data.get("policies", {})
        if not isinstance(policies, dict):
            logger.warning("Ignoring invalid [policies] section")

        return cls(
            data_dir=data_dir,
            storage=storage,
            predictor=_load_section(data, "predictor", PredictorSettings),
            gate=_load_section(data, "gate", GateSettings),
            policies=_merge_policies(policies if isinstance(policies, dict) else {}),
            version=str(data.get("version", "1.0")),
        )

    def save(self) -> None:
        """Save configuration to TOML file (atomic write via temp+rename)."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.toml"

        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(f"Invalid storage backend: {self.storage}")

        # Build TOML content manually (no toml write dependency)
        lines = [
            "# fixme-advisor configuration",
            "",
            f'version = "{self.version}"',
            f'storage = "{self.storage}"',
            "",
            "# kNN predictor",
            "[predictor]",
            f"k = {self.predictor.k}",
            f"min_samples = {self.predictor.min_samples}",
            "",
            "# Usage gate",
            "[gate]",
            f"max_usage_records = {self.gate.max_usage_records}",
        ]

        for name, policy in self.policies.items():
            if not _ACTION_NAME_PATTERN.match(name):
                raise ValueError(f"Invalid action type for config save: {name!r}")
            label = policy.label.replace("\\", "\\\\").replace('"', '\\"')
            lines += [
                "",
                f"[policies.{name}]",
                f"cooldown_ms = {policy.cooldown_ms}",
                f"daily_limit = {policy.daily_limit}",
                f'label = "{label}"',
            ]

        # Atomic write: write to temp file, then rename
        content = "\n".join(lines) + "\n"
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), suffix=".toml.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(config_path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    @property
    def config_path(self) -> Path:
        """Get path to config file."""
        return self.data_dir / "config.toml"

    @property
    def sqlite_path(self) -> Path:
        return self.data_dir / "events.db"

    @property
    def json_path(self) -> Path:
        return self.data_dir / JSON_FILENAME


# Singleton instance for easy access
_config: AdvisorConfig | None = None


def get_config(reload: bool = False) -> AdvisorConfig:
    """Get the unified configuration (singleton).

    Args:
        reload: Force reload from disk

    Returns:
        AdvisorConfig instance
    """
    global _config
    if _config is None or reload:
        _config = AdvisorConfig.load()
    return _config
