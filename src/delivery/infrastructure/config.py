"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_DIR = Path("data")


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    print_delay: float = 1.5
    alert_seconds: float = 8.0
    poll_interval: float = 1.0
    log_level: str = "WARNING"


def load_settings(data_dir: Path | None = None) -> Settings:
    """Build Settings from ``DELIVERY_*`` and ``LOG_LEVEL`` variables."""
    env_dir = os.getenv("DELIVERY_DATA_DIR")
    return Settings(
        data_dir=data_dir or (Path(env_dir) if env_dir else DEFAULT_DATA_DIR),
        print_delay=_float("DELIVERY_PRINT_DELAY", 1.5),
        alert_seconds=_float("DELIVERY_ALERT_SECONDS", 8.0),
        poll_interval=_float("DELIVERY_POLL_INTERVAL", 1.0),
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    )
