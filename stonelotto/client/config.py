"""Configuration helpers for the client runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientSettings:
    server_url: str
    token: str | None
    poll_interval: float
    settle_delay_ms: int
    announce_delay_ms: int
    game_sounds_enabled: bool
    music_enabled: bool
    request_timeout: float


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> ClientSettings:
    return ClientSettings(
        server_url=os.getenv("STONELOTTO_SERVER_URL", "http://127.0.0.1:5000"),
        token=os.getenv("STONELOTTO_TOKEN") or None,
        poll_interval=float(os.getenv("STONELOTTO_POLL_INTERVAL", "2.0")),
        settle_delay_ms=int(os.getenv("STONELOTTO_SETTLE_DELAY_MS", "2000")),
        announce_delay_ms=int(os.getenv("STONELOTTO_ANNOUNCE_DELAY_MS", "1000")),
        game_sounds_enabled=_env_flag("STONELOTTO_GAME_SOUNDS", "true"),
        music_enabled=_env_flag("STONELOTTO_MUSIC", "false"),
        request_timeout=float(os.getenv("STONELOTTO_REQUEST_TIMEOUT", "10.0")),
    )
