"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3001"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _timeout_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class AnimationTimings:
    """Durations (milliseconds) used by the draw reveal sequence."""

    cycle_interval_ms: int = 100
    cycle_duration_ms: int = 3000
    settle_ms: int = 1000
    reveal_ms: int = 3000

    @property
    def cycle_steps(self) -> int:
        """Number of random-number display updates per winner."""
        if self.cycle_interval_ms <= 0:
            return 0
        return max(self.cycle_duration_ms // self.cycle_interval_ms, 0)

    @classmethod
    def instant(cls) -> "AnimationTimings":
        return cls(cycle_interval_ms=0, cycle_duration_ms=0, settle_ms=0, reveal_ms=0)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the client.

    Attributes
    ----------
    api_base_url : str
        Base URL of the raffle API, without a trailing slash.
    api_timeout : Optional[float]
        Request timeout in seconds. ``None`` waits indefinitely.
    export_dir : str
        Directory where exported results sheets are written.
    log_level : str
        Name of the root log level.
    timings : AnimationTimings
        Reveal sequence durations.
    """

    api_base_url: str = DEFAULT_BASE_URL
    api_timeout: Optional[float] = None
    export_dir: str = "."
    log_level: str = "INFO"
    timings: AnimationTimings = AnimationTimings()


def get_settings() -> Settings:
    """Resolve settings from the process environment and a local ``.env``."""

    load_dotenv()
    base_url = os.getenv("RAFFLE_API_BASE_URL") or DEFAULT_BASE_URL
    defaults = AnimationTimings()
    timings = AnimationTimings(
        cycle_interval_ms=_int_env("RAFFLE_CYCLE_INTERVAL_MS", defaults.cycle_interval_ms),
        cycle_duration_ms=_int_env("RAFFLE_CYCLE_DURATION_MS", defaults.cycle_duration_ms),
        settle_ms=_int_env("RAFFLE_SETTLE_MS", defaults.settle_ms),
        reveal_ms=_int_env("RAFFLE_REVEAL_MS", defaults.reveal_ms),
    )
    return Settings(
        api_base_url=base_url.rstrip("/"),
        api_timeout=_timeout_env("RAFFLE_API_TIMEOUT"),
        export_dir=os.getenv("RAFFLE_EXPORT_DIR") or ".",
        log_level=(os.getenv("RAFFLE_LOG_LEVEL") or "INFO").upper().strip(),
        timings=timings,
    )
