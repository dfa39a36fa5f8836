"""Site-level models: details, overview, environmental benefits, inventory."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pysolaredge.models._base import ApiTimestamp, SolarEdgeBaseModel


class SiteLocation(SolarEdgeBaseModel):
    country: str | None = None
    state: str | None = None
    city: str | None = None
    address: str | None = None
    zip: str | None = None
    time_zone: str | None = None


class SiteDetails(SolarEdgeBaseModel):
    """Static description of a site.

    Parameters
    ----------
    id : int or None
        Site identifier.
    name : str
        Site name.
    status : str or None
        ``Active`` or ``Pending``.
    peak_power : float or None
        Installed peak power in kWp.
    installation_date : datetime or None
        Installation date.
    location : SiteLocation or None
        Postal location of the site.
    """

    id: int | None = None
    name: str = ""
    account_id: int | None = None
    status: str | None = None
    peak_power: float | None = None
    last_update_time: ApiTimestamp = None
    currency: str | None = None
    installation_date: ApiTimestamp = None
    type: str | None = None
    location: SiteLocation | None = None


class SiteDetailsResponse(SolarEdgeBaseModel):
    details: SiteDetails


class EnergyAmount(SolarEdgeBaseModel):
    energy: float | None = None
    revenue: float | None = None


class CurrentPower(SolarEdgeBaseModel):
    power: float | None = None


class SiteOverview(SolarEdgeBaseModel):
    """Energy totals and current production.

    Energy values are in Wh, power in W.
    """

    last_update_time: ApiTimestamp = None
    life_time_data: EnergyAmount = Field(default_factory=EnergyAmount)
    last_year_data: EnergyAmount = Field(default_factory=EnergyAmount)
    last_month_data: EnergyAmount = Field(default_factory=EnergyAmount)
    last_day_data: EnergyAmount = Field(default_factory=EnergyAmount)
    current_power: CurrentPower = Field(default_factory=CurrentPower)
    measured_by: str | None = None


class OverviewResponse(SolarEdgeBaseModel):
    overview: SiteOverview


class GasEmissionSaved(SolarEdgeBaseModel):
    units: str | None = None
    co2: float | None = None
    so2: float | None = None
    nox: float | None = None


class EnvBenefits(SolarEdgeBaseModel):
    gas_emission_saved: GasEmissionSaved = Field(default_factory=GasEmissionSaved)
    trees_planted: float | None = None
    light_bulbs: float | None = None


class EnvBenefitsResponse(SolarEdgeBaseModel):
    env_benefits: EnvBenefits


class Inverter(SolarEdgeBaseModel):
    """One inverter from the site inventory.

    ``status`` is ``1`` (or ``"1"``) when the inverter reports online.
    """

    name: str = ""
    manufacturer: str | None = None
    model: str | None = None
    serial_number: str | None = Field(default=None, alias="SN")
    communication_method: str | None = None
    cpu_version: str | None = None
    connected_optimizers: int | None = None
    status: int | str | None = None

    @property
    def is_online(self) -> bool:
        return str(self.status) == "1"


class Inventory(SolarEdgeBaseModel):
    inverters: list[Inverter] = Field(default_factory=list)
    meters: list[dict[str, Any]] = Field(default_factory=list)
    sensors: list[dict[str, Any]] = Field(default_factory=list)
    gateways: list[dict[str, Any]] = Field(default_factory=list)
    batteries: list[dict[str, Any]] = Field(default_factory=list)


class InventoryResponse(SolarEdgeBaseModel):
    # The API capitalizes this envelope key, unlike every other endpoint.
    inventory: Inventory = Field(alias="Inventory")
