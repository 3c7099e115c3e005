"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(slots=True)
class Settings:
    """Container for hub settings."""

    topics: tuple[str, ...] = field(default_factory=tuple)
    tick_seconds: float = 0.0
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            topics=_env_list("SSEHUB_TOPICS"),
            tick_seconds=_env_float("SSEHUB_TICK_SECONDS", default=0.0),
            log_level=os.getenv("SSEHUB_LOG_LEVEL", "INFO").upper(),
            log_json=_env_flag("SSEHUB_LOG_JSON", default=False),
        )

    @property
    def ticker_enabled(self) -> bool:
        return self.tick_seconds > 0


def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, *, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())
