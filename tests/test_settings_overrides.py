from __future__ import annotations

from typing import Iterable

import pytest

from cli.config import load_config
from services.poller import build_default_poller
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


@pytest.fixture(autouse=True)
def fresh_caches() -> Iterable[None]:
    caches = (get_settings, build_default_poller)
    _clear_caches(caches)
    yield
    _clear_caches(caches)


def test_defaults_apply_without_environment(monkeypatch) -> None:
    for name in (
        "TELEMETRY_ENDPOINT_URL",
        "TELEMETRY_POLL_INTERVAL",
        "TELEMETRY_FETCH_TIMEOUT",
        "TELEMETRY_MAX_READINGS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.endpoint_url == "http://localhost:8000/readings"
    assert settings.poll_interval == 5.0
    assert settings.fetch_timeout < settings.poll_interval
    assert settings.max_readings is None
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("TELEMETRY_ENDPOINT_URL", "http://sensors.test/V1/readings")
    monkeypatch.setenv("TELEMETRY_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("TELEMETRY_FETCH_TIMEOUT", "1")
    monkeypatch.setenv("TELEMETRY_MAX_READINGS", "200")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    poller = build_default_poller()

    assert poller.source.endpoint_url == "http://sensors.test/V1/readings"
    assert poller.interval == 2.5
    assert poller.max_readings == 200
    assert get_settings().fetch_timeout == 1.0
    assert get_settings().log_level == "DEBUG"


@pytest.mark.parametrize("value", ["", "  ", "abc", "0", "-3"])
def test_invalid_numbers_fall_back_to_defaults(monkeypatch, value: str) -> None:
    monkeypatch.setenv("TELEMETRY_POLL_INTERVAL", value)
    monkeypatch.setenv("TELEMETRY_MAX_READINGS", value)

    settings = get_settings()

    assert settings.poll_interval == 5.0
    assert settings.max_readings is None


def test_cli_options_win_over_environment(monkeypatch) -> None:
    monkeypatch.setenv("TELEMETRY_ENDPOINT_URL", "http://env.test/readings")
    monkeypatch.setenv("TELEMETRY_POLL_INTERVAL", "9")

    config = load_config(endpoint_url="http://cli.test/readings", poll_interval=None, fetch_timeout=0)

    assert config.endpoint_url == "http://cli.test/readings"
    assert config.poll_interval == 9.0
    assert config.fetch_timeout == 4.0
