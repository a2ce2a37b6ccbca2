"""Monitor configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_ADDR = "http://localhost:9187/metrics"
DEFAULT_INTERVAL_SECONDS = 1

# Response headers must arrive within this bound or the poll fails.
HEADER_TIMEOUT_SECONDS = 60.0
CONNECT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class MonitorConfig:
    """Configuración del monitor de catch-up."""
    endpoint: str
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    header_timeout_seconds: float = HEADER_TIMEOUT_SECONDS
    connect_timeout_seconds: float = CONNECT_TIMEOUT_SECONDS
    channel_capacity: int = 2
    redraw_delay_seconds: float = 0.005
    error_backoff_seconds: float = 0.005
    max_failures: Optional[int] = None  # None = retry forever

    def validate(self) -> "MonitorConfig":
        if not self.endpoint:
            raise ConfigError("Please specify -addr")
        if self.interval_seconds < 1:
            raise ConfigError(f"interval must be a positive number of seconds, got {self.interval_seconds}")
        if self.max_failures is not None and self.max_failures < 1:
            raise ConfigError(f"max-failures must be positive, got {self.max_failures}")
        return self


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def get_config(
    addr: Optional[str] = None,
    interval: Optional[int] = None,
    max_failures: Optional[int] = None,
) -> MonitorConfig:
    """Build the config from the environment, letting explicit arguments win.

    An env file (``CATCHUP_ENV_FILE``, default ``.env``) is loaded when present
    but never overrides variables already set in the real environment.
    """
    env_file = os.getenv("CATCHUP_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    endpoint = addr if addr is not None else os.getenv("CATCHUP_ADDR", DEFAULT_ADDR)
    interval_seconds = interval if interval is not None else _env_int("CATCHUP_INTERVAL", DEFAULT_INTERVAL_SECONDS)
    if max_failures is None:
        max_failures = _env_int("CATCHUP_MAX_FAILURES", None)

    return MonitorConfig(
        endpoint=endpoint.strip(),
        interval_seconds=interval_seconds,
        max_failures=max_failures,
    ).validate()
