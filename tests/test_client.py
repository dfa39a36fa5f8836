from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from pysolaredge.client import SolarEdgeClient
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.exceptions import RateLimitError, SolarEdgeError
from pysolaredge.storage import JsonFileStore, MemoryStore


class _RecordingTransport:
    def __init__(self, payloads: dict[str, Any]) -> None:
        self._payloads = payloads
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        self.calls.append((endpoint, dict(params)))
        result = self._payloads[endpoint]
        if isinstance(result, BaseException):
            raise result
        return result


def _config(**overrides: Any) -> SolarEdgeConfig:
    return SolarEdgeConfig(api_key="KEY", site_id="4262188", **overrides)


@pytest.mark.asyncio
async def test_typed_getters_build_expected_requests() -> None:
    transport = _RecordingTransport(
        {
            "energyDetails": {"energyDetails": {"timeUnit": "MONTH", "meters": []}},
            "powerDetails": {"powerDetails": {"meters": []}},
            "power": {"power": {"values": []}},
        }
    )
    async with SolarEdgeClient(_config(), transport=transport) as client:
        energy = await client.get_energy("2026-01-01 00:00:00", datetime(2026, 10, 18, 23, 59, 59), "MONTH")
        await client.get_power_details(datetime(2026, 10, 18), datetime(2026, 10, 18, 23, 59, 59))
        await client.get_power("2026-10-18 00:00:00", "2026-10-18 23:59:59")

    assert energy.energy_details.time_unit == "MONTH"
    assert transport.calls[0] == (
        "energyDetails",
        {
            "startTime": "2026-01-01 00:00:00",
            "endTime": "2026-10-18 23:59:59",
            "timeUnit": "MONTH",
            "meters": "PRODUCTION,PURCHASED",
        },
    )
    assert transport.calls[1] == (
        "powerDetails",
        {
            "startTime": "2026-10-18 00:00:00",
            "endTime": "2026-10-18 23:59:59",
            "meters": "PRODUCTION,CONSUMPTION,PURCHASED",
        },
    )
    assert transport.calls[2][0] == "power"


@pytest.mark.asyncio
async def test_simple_getters_return_models() -> None:
    transport = _RecordingTransport(
        {
            "details": {"details": {"name": "Home"}},
            "overview": {"overview": {"currentPower": {"power": 1500}}},
            "currentPowerFlow": {"siteCurrentPowerFlow": {"PV": {"currentPower": 2.5}}},
            "envBenefits": {"envBenefits": {"treesPlanted": 14.5}},
            "inventory": {"Inventory": {"inverters": [{"name": "Inv", "status": 1}]}},
        }
    )
    async with SolarEdgeClient(_config(), transport=transport) as client:
        assert (await client.get_details()).details.name == "Home"
        assert (await client.get_overview()).overview.current_power.power == 1500
        assert (await client.get_power_flow()).site_current_power_flow.pv.current_power == 2.5
        assert (await client.get_env_benefits()).env_benefits.trees_planted == 14.5
        assert (await client.get_inventory()).inventory.inverters[0].is_online


@pytest.mark.asyncio
async def test_repeated_getter_is_served_from_cache() -> None:
    transport = _RecordingTransport({"overview": {"overview": {}}})
    async with SolarEdgeClient(_config(), transport=transport) as client:
        await client.get_overview()
        await client.get_overview()
        await client.get_overview(force=True)

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_force_refresh_clears_cooldown() -> None:
    transport = _RecordingTransport({"overview": RateLimitError("API daily limit quota exceeded")})
    store = MemoryStore()
    async with SolarEdgeClient(_config(), store=store, transport=transport) as client:
        with pytest.raises(RateLimitError):
            await client.get_overview()
        assert client.blocked_until is not None

        client.force_refresh()

        assert client.blocked_until is None


@pytest.mark.asyncio
async def test_cache_path_uses_json_file_store(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    transport = _RecordingTransport({"overview": {"overview": {"lastDayData": {"energy": 1}}}})

    async with SolarEdgeClient(_config(cache_path=str(path)), transport=transport) as client:
        await client.get_overview()

    # A new client with the same file answers from disk.
    async with SolarEdgeClient(_config(cache_path=str(path)), transport=transport) as client:
        overview = await client.get_overview()

    assert overview.overview.last_day_data.energy == 1
    assert len(transport.calls) == 1
    assert JsonFileStore(path).get("solar_last_success_overview") is not None


def test_api_requires_context_manager() -> None:
    client = SolarEdgeClient(_config())
    with pytest.raises(SolarEdgeError, match="not initialized"):
        _ = client.api
