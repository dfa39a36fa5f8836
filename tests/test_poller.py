from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import date
from typing import Any

import pytest

from pysolaredge.client import SolarEdgeClient
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.dashboard import ConnectionStatus, DashboardSnapshot
from pysolaredge.poller import DashboardPoller


class _CountingTransport:
    def __init__(self) -> None:
        self.calls = 0

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        self.calls += 1
        envelopes = {
            "overview": {"overview": {}},
            "currentPowerFlow": {"siteCurrentPowerFlow": {}},
            "envBenefits": {"envBenefits": {}},
            "inventory": {"Inventory": {"inverters": []}},
            "powerDetails": {"powerDetails": {"meters": []}},
            "energyDetails": {"energyDetails": {"meters": []}},
        }
        return envelopes[endpoint]


def _client(transport: _CountingTransport) -> SolarEdgeClient:
    return SolarEdgeClient(SolarEdgeConfig(api_key="KEY", site_id="1", poll_interval=0.01), transport=transport)


@pytest.mark.asyncio
async def test_poller_runs_immediately_and_repeats() -> None:
    transport = _CountingTransport()
    snapshots: list[DashboardSnapshot] = []
    poller = DashboardPoller(_client(transport), on_snapshot=snapshots.append, day=lambda: date(2026, 10, 18))

    poller.start()
    for _ in range(100):
        if len(snapshots) >= 2:
            break
        await asyncio.sleep(0.01)
    await poller.stop()

    assert len(snapshots) >= 2
    assert not poller.running
    assert poller.last_snapshot is snapshots[-1]
    assert snapshots[0].day == date(2026, 10, 18)
    # Second cycle is answered from the cache.
    assert transport.calls == 7


@pytest.mark.asyncio
async def test_forced_refresh_goes_to_network() -> None:
    transport = _CountingTransport()
    poller = DashboardPoller(_client(transport))

    await poller.refresh()
    snapshot = await poller.refresh(force=True)

    assert snapshot.status is ConnectionStatus.ONLINE
    assert transport.calls == 14


@pytest.mark.asyncio
async def test_stop_without_start_is_noop() -> None:
    poller = DashboardPoller(_client(_CountingTransport()), interval=60)
    await poller.stop()
    assert not poller.running
