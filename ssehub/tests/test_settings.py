"""Tests for environment settings and logging setup."""
from __future__ import annotations

import pytest

from ..util.log import configure_logging
from ..util.settings import Settings


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SSEHUB_TOPICS", "SSEHUB_TICK_SECONDS", "SSEHUB_LOG_LEVEL", "SSEHUB_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.topics == ()
    assert not settings.ticker_enabled


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSEHUB_TOPICS", "news, alerts,,")
    monkeypatch.setenv("SSEHUB_TICK_SECONDS", "2.5")
    monkeypatch.setenv("SSEHUB_LOG_LEVEL", "debug")
    monkeypatch.setenv("SSEHUB_LOG_JSON", "yes")

    settings = Settings.from_env()

    assert settings.topics == ("news", "alerts")
    assert settings.tick_seconds == 2.5
    assert settings.ticker_enabled
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True


@pytest.mark.parametrize("raw", ["soon", "-1"])
def test_invalid_tick_interval(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("SSEHUB_TICK_SECONDS", raw)
    with pytest.raises(ValueError, match="SSEHUB_TICK_SECONDS"):
        Settings.from_env()


def test_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("chatty")
