"""Power time series and live power-flow models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from pysolaredge.models._base import MeterSeries, SolarEdgeBaseModel, TimeValue


class PowerSeries(SolarEdgeBaseModel):
    """Site power sampled every quarter hour.

    Parameters
    ----------
    time_unit : str or None
        Sampling period, normally ``QUARTER_OF_AN_HOUR``.
    unit : str or None
        Measurement unit, normally ``W``.
    values : list of TimeValue
        Samples; ``value`` is ``None`` where no data was reported.
    """

    time_unit: str | None = None
    unit: str | None = None
    values: list[TimeValue] = Field(default_factory=list)


class PowerResponse(SolarEdgeBaseModel):
    power: PowerSeries


class PowerDetails(SolarEdgeBaseModel):
    time_unit: str | None = None
    unit: str | None = None
    meters: list[MeterSeries] = Field(default_factory=list)

    def meter(self, meter_type: str) -> MeterSeries | None:
        """Return the series for *meter_type*, compared case-insensitively."""
        wanted = meter_type.lower()
        for series in self.meters:
            if series.type.lower() == wanted:
                return series
        return None


class PowerDetailsResponse(SolarEdgeBaseModel):
    power_details: PowerDetails


class FlowNode(SolarEdgeBaseModel):
    """One element of the power-flow diagram (``PV``, ``GRID``, ``LOAD`` ...)."""

    status: str | None = None
    current_power: float | None = None
    charge_level: float | None = None
    critical: bool | None = None


class FlowConnection(SolarEdgeBaseModel):
    source: str = Field(default="", alias="from")
    target: str = Field(default="", alias="to")


class PowerFlow(SolarEdgeBaseModel):
    """Current power flow between the site's elements.

    The API names the elements in upper case (``PV``, ``GRID``, ``LOAD``,
    ``STORAGE``); they are exposed here as lower-case attributes.
    """

    update_refresh_rate: int | None = None
    unit: str | None = None
    connections: list[FlowConnection] = Field(default_factory=list)
    pv: FlowNode = Field(default_factory=FlowNode, alias="PV")
    grid: FlowNode = Field(default_factory=FlowNode, alias="GRID")
    load: FlowNode = Field(default_factory=FlowNode, alias="LOAD")
    storage: FlowNode | None = Field(default=None, alias="STORAGE")

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_nodes(cls, values: Any) -> Any:
        # Sites without a battery report STORAGE as an empty object.
        if isinstance(values, dict) and values.get("STORAGE") == {}:
            values = {key: value for key, value in values.items() if key != "STORAGE"}
        return values


class PowerFlowResponse(SolarEdgeBaseModel):
    site_current_power_flow: PowerFlow
