"""Tests for the HTTP bridge environment settings."""

from __future__ import annotations

import re
from collections.abc import Generator

import pytest

from fixme_advisor.utils.config import Config, get_config, reset_config


@pytest.fixture(autouse=True)
def _fresh_config() -> Generator[None, None, None]:
    reset_config()
    yield
    reset_config()


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("HOST", "PORT", "DEBUG", "CORS_ORIGINS"):
            monkeypatch.delenv(f"FIXME_ADVISOR_{name}", raising=False)

        config = Config.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 8765
        assert config.debug is False

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIXME_ADVISOR_HOST", "0.0.0.0")
        monkeypatch.setenv("FIXME_ADVISOR_PORT", "9100")
        monkeypatch.setenv("FIXME_ADVISOR_DEBUG", "yes")
        monkeypatch.setenv("FIXME_ADVISOR_CORS_ORIGINS", "http://a.test, http://b.test:*")

        config = Config.from_env()

        assert (config.host, config.port, config.debug) == ("0.0.0.0", 9100, True)
        assert config.cors_origins == ["http://a.test", "http://b.test:*"]

    @pytest.mark.parametrize("raw", ["eighty", "0", "70000"])
    def test_bad_port_falls_back(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("FIXME_ADVISOR_PORT", raw)

        assert Config.from_env().port == 8765

    def test_get_config_is_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIXME_ADVISOR_PORT", "9001")
        first = get_config()
        monkeypatch.setenv("FIXME_ADVISOR_PORT", "9002")

        assert get_config() is first
        reset_config()
        assert get_config().port == 9002


class TestOrigins:
    def test_exact_and_wildcard_split(self) -> None:
        config = Config(cors_origins=["http://app.test", "http://localhost:*"])

        assert config.exact_origins == ["http://app.test"]
        pattern = config.origin_regex
        assert pattern is not None
        assert re.match(pattern, "http://localhost:5173")
        assert re.match(pattern, "http://localhost")
        assert not re.match(pattern, "http://localhost.evil.test")

    def test_no_wildcards(self) -> None:
        assert Config(cors_origins=["http://app.test"]).origin_regex is None
