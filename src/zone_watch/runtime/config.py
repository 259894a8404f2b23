"""Runtime settings resolved from ``ZONE_WATCH_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX

DEFAULT_SYMBOL = "ETHUSDT"
DEFAULT_TICK_INTERVAL = 2.0
DEFAULT_ANALYZE_TICKS = 5
DEFAULT_SAVE_FILE = "bot_data.json"
DEFAULT_API_URL = "https://api.binance.com"
DEFAULT_HTTP_TIMEOUT = 10.0


def _lookup(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_float(env: Mapping[str, str], name: str, fallback: float) -> float:
    raw = _lookup(env, name)
    if raw is None:
        return fallback
    try:
        value = float(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = _lookup(env, name)
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True, slots=True)
class Settings:
    """Settings shared by the market poller, persistence and the UI."""

    symbol: str = DEFAULT_SYMBOL
    tick_interval: float = DEFAULT_TICK_INTERVAL
    analyze_ticks: int = DEFAULT_ANALYZE_TICKS
    save_file: str = DEFAULT_SAVE_FILE
    api_url: str = DEFAULT_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        source = os.environ if env is None else env
        return cls(
            symbol=(_lookup(source, "SYMBOL") or DEFAULT_SYMBOL).upper(),
            tick_interval=_env_float(source, "TICK_INTERVAL", DEFAULT_TICK_INTERVAL),
            analyze_ticks=_env_int(source, "ANALYZE_TICKS", DEFAULT_ANALYZE_TICKS),
            save_file=_lookup(source, "SAVE_FILE") or DEFAULT_SAVE_FILE,
            api_url=_lookup(source, "API_URL") or DEFAULT_API_URL,
            http_timeout=_env_float(source, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )


__all__ = ["Settings"]
