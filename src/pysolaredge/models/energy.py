"""Energy time series models."""

from __future__ import annotations

from pydantic import Field

from pysolaredge.models._base import MeterSeries, SolarEdgeBaseModel, TimeValue


class EnergySeries(SolarEdgeBaseModel):
    """Site energy production aggregated per ``time_unit`` (Wh)."""

    time_unit: str | None = None
    unit: str | None = None
    measured_by: str | None = None
    values: list[TimeValue] = Field(default_factory=list)


class EnergyResponse(SolarEdgeBaseModel):
    energy: EnergySeries


class EnergyDetails(SolarEdgeBaseModel):
    """Per-meter energy aggregated per ``time_unit``.

    Parameters
    ----------
    time_unit : str or None
        ``DAY``, ``WEEK``, ``MONTH`` or ``YEAR`` (``QUARTER_OF_AN_HOUR`` and
        ``HOUR`` are accepted by the API for short ranges).
    unit : str or None
        Measurement unit, normally ``Wh``.
    meters : list of MeterSeries
        One series per requested meter.
    """

    time_unit: str | None = None
    unit: str | None = None
    meters: list[MeterSeries] = Field(default_factory=list)


class EnergyDetailsResponse(SolarEdgeBaseModel):
    energy_details: EnergyDetails
