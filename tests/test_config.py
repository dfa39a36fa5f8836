from __future__ import annotations

import pytest

from pysolaredge._constants import BASE_URL, DEV_PROXY_URL
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.exceptions import SolarEdgeConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "SOLAREDGE_API_KEY",
        "SOLAREDGE_SITE_ID",
        "SOLAREDGE_BASE_URL",
        "SOLAREDGE_CACHE_PATH",
        "SOLAREDGE_REQUEST_TIMEOUT",
        "SOLAREDGE_RATE_LIMIT_COOLDOWN",
        "SOLAREDGE_POLL_INTERVAL",
        "SOLAREDGE_DEV_PROXY",
        "SOLAREDGE_PROXY_URL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = SolarEdgeConfig(api_key="KEY", site_id=42)
    assert config.site_id == "42"
    assert config.base_url == BASE_URL
    assert config.rate_limit_cooldown == 3600
    assert config.cache_path is None


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLAREDGE_API_KEY", "KEY")
    monkeypatch.setenv("SOLAREDGE_SITE_ID", "4262188")
    monkeypatch.setenv("SOLAREDGE_RATE_LIMIT_COOLDOWN", "1800")
    monkeypatch.setenv("SOLAREDGE_CACHE_PATH", "/tmp/solar.json")

    config = SolarEdgeConfig.from_env()

    assert config.api_key == "KEY"
    assert config.site_id == "4262188"
    assert config.rate_limit_cooldown == 1800.0
    assert config.cache_path == "/tmp/solar.json"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLAREDGE_API_KEY", "KEY")
    monkeypatch.setenv("SOLAREDGE_SITE_ID", "1")
    monkeypatch.setenv("SOLAREDGE_POLL_INTERVAL", "60")

    config = SolarEdgeConfig.from_env(site_id="2", poll_interval=300.0)

    assert config.site_id == "2"
    assert config.poll_interval == 300.0


def test_dev_proxy_switches_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLAREDGE_DEV_PROXY", "yes")

    config = SolarEdgeConfig.from_env(api_key="KEY", site_id="1")

    assert config.base_url == DEV_PROXY_URL


def test_base_url_trailing_slash_is_stripped() -> None:
    config = SolarEdgeConfig(api_key="KEY", site_id="1", base_url="http://proxy/solaredge/")
    assert config.base_url == "http://proxy/solaredge"


def test_missing_credentials_raise() -> None:
    with pytest.raises(SolarEdgeConfigError, match="SOLAREDGE_API_KEY"):
        SolarEdgeConfig.from_env(site_id="1")
    with pytest.raises(SolarEdgeConfigError, match="SOLAREDGE_SITE_ID"):
        SolarEdgeConfig.from_env(api_key="KEY")


def test_invalid_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLAREDGE_REQUEST_TIMEOUT", "fast")
    with pytest.raises(SolarEdgeConfigError, match="SOLAREDGE_REQUEST_TIMEOUT"):
        SolarEdgeConfig.from_env(api_key="KEY", site_id="1")
