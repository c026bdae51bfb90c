"""Environment configuration for the HTTP bridge."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

ENV_PREFIX = "FIXME_ADVISOR_"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765
DEFAULT_CORS_ORIGINS = ("http://localhost:*", "http://127.0.0.1:*")


def _env(name: str) -> str | None:
    return os.getenv(ENV_PREFIX + name)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes", "on")


def _env_port(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        port = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s%s=%r", ENV_PREFIX, name, raw)
        return default
    if not 0 < port < 65536:
        logger.warning("Ignoring out-of-range %s%s=%d", ENV_PREFIX, name, port)
        return default
    return port


def _env_csv(name: str, default: tuple[str, ...]) -> list[str]:
    raw = _env(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Config:
    """
    HTTP bridge settings.

    CORS origins ending in ``:*`` match any port on that host.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> Config:
        """Read FIXME_ADVISOR_HOST, _PORT, _DEBUG and _CORS_ORIGINS."""
        return cls(
            host=_env("HOST") or DEFAULT_HOST,
            port=_env_port("PORT", DEFAULT_PORT),
            debug=_env_flag("DEBUG", False),
            cors_origins=_env_csv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )

    @property
    def exact_origins(self) -> list[str]:
        return [o for o in self.cors_origins if not o.endswith(":*")]

    @property
    def origin_regex(self) -> str | None:
        """Regex for the wildcard-port origins, or None when there are none."""
        hosts = [re.escape(o[:-2]) for o in self.cors_origins if o.endswith(":*")]
        if not hosts:
            return None
        return rf"^(?:{'|'.join(hosts)})(?::\d+)?$"


_config: Config | None = None


def get_config() -> Config:
    """Bridge settings, read from the environment on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget cached settings so the next get_config() re-reads the environment."""
    global _config
    _config = None
