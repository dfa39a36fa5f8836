"""Tests for Pydantic response models."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from pysolaredge.models import (
    EnergyDetailsResponse,
    InventoryResponse,
    OverviewResponse,
    PowerDetailsResponse,
    PowerFlowResponse,
    SiteDetailsResponse,
    validate_payload,
)


class TestOverview:
    SAMPLE_PAYLOAD: dict = {
        "overview": {
            "lastUpdateTime": "2026-10-18 12:34:56",
            "lifeTimeData": {"energy": 15400000.0, "revenue": 946.13},
            "lastYearData": {"energy": 5400000.0},
            "lastMonthData": {"energy": 1250000.0},
            "lastDayData": {"energy": 45200.0},
            "currentPower": {"power": 5200.5},
            "measuredBy": "INVERTER",
        }
    }

    def test_fields(self) -> None:
        overview = OverviewResponse.model_validate(self.SAMPLE_PAYLOAD).overview
        assert overview.last_update_time == datetime(2026, 10, 18, 12, 34, 56)
        assert overview.life_time_data.energy == 15400000.0
        assert overview.life_time_data.revenue == 946.13
        assert overview.last_day_data.energy == 45200.0
        assert overview.current_power.power == 5200.5
        assert overview.measured_by == "INVERTER"

    def test_raw_is_preserved(self) -> None:
        overview = OverviewResponse.model_validate(self.SAMPLE_PAYLOAD).overview
        assert overview.raw["measuredBy"] == "INVERTER"

    def test_missing_sections_default(self) -> None:
        overview = OverviewResponse.model_validate({"overview": {"lastDayData": None}}).overview
        assert overview.last_day_data.energy is None
        assert overview.current_power.power is None

    def test_missing_envelope_raises(self) -> None:
        with pytest.raises(ValidationError):
            OverviewResponse.model_validate({"details": {}})


def test_details() -> None:
    details = SiteDetailsResponse.model_validate(
        {
            "details": {
                "id": 4262188,
                "name": "Home",
                "status": "Active",
                "peakPower": 9.9,
                "installationDate": "2021-05-01",
                "location": {"country": "Netherlands", "city": "Utrecht", "timeZone": "Europe/Amsterdam"},
            }
        }
    ).details
    assert details.id == 4262188
    assert details.peak_power == 9.9
    assert details.installation_date == datetime(2021, 5, 1)
    assert details.location is not None
    assert details.location.time_zone == "Europe/Amsterdam"


def test_power_details_meter_lookup() -> None:
    details = PowerDetailsResponse.model_validate(
        {
            "powerDetails": {
                "timeUnit": "QUARTER_OF_AN_HOUR",
                "unit": "W",
                "meters": [
                    {"type": "Production", "values": [{"date": "2026-10-18 12:00:00", "value": 4100.0}]},
                    {"type": "Purchased", "values": [{"date": "2026-10-18 12:00:00"}]},
                ],
            }
        }
    ).power_details
    production = details.meter("production")
    assert production is not None
    assert production.values[0].value == 4100.0
    assert production.values[0].date == datetime(2026, 10, 18, 12, 0)
    assert details.meter("Purchased").values[0].value is None
    assert details.meter("Consumption") is None


def test_energy_details() -> None:
    energy = EnergyDetailsResponse.model_validate(
        {"energyDetails": {"timeUnit": "MONTH", "unit": "Wh", "meters": [{"type": "Production", "values": []}]}}
    ).energy_details
    assert energy.time_unit == "MONTH"
    assert energy.meters[0].type == "Production"


def test_power_flow_upper_case_nodes() -> None:
    flow = PowerFlowResponse.model_validate(
        {
            "siteCurrentPowerFlow": {
                "updateRefreshRate": 3,
                "unit": "kW",
                "connections": [{"from": "GRID", "to": "Load"}, {"from": "PV", "to": "Load"}],
                "GRID": {"status": "Active", "currentPower": 1.2},
                "LOAD": {"status": "Active", "currentPower": 4.0},
                "PV": {"status": "Active", "currentPower": 5.2},
                "STORAGE": {},
            }
        }
    ).site_current_power_flow
    assert flow.pv.current_power == 5.2
    assert flow.grid.current_power == 1.2
    assert flow.storage is None
    assert flow.connections[0].source == "GRID"
    assert flow.connections[0].target == "Load"


def test_inventory_capitalized_envelope_and_status() -> None:
    inventory = InventoryResponse.model_validate(
        {
            "Inventory": {
                "inverters": [
                    {"name": "Inverter 1", "SN": "7E0000-01", "status": 1},
                    {"name": "Inverter 2", "SN": "7E0000-02", "status": "0"},
                ]
            }
        }
    ).inventory
    assert inventory.inverters[0].serial_number == "7E0000-01"
    assert inventory.inverters[0].is_online
    assert not inventory.inverters[1].is_online


def test_validate_payload_dispatches_on_endpoint() -> None:
    assert isinstance(validate_payload("overview", {"overview": {}}), OverviewResponse)
    assert validate_payload("someOtherEndpoint", {"anything": 1}) is None
    with pytest.raises(ValidationError):
        validate_payload("inventory", {"inverters": []})
