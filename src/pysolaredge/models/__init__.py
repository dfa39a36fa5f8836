"""Data models for SolarEdge API responses."""

from __future__ import annotations

from typing import Any

from pysolaredge._constants import (
    ENDPOINT_DETAILS,
    ENDPOINT_ENERGY,
    ENDPOINT_ENERGY_DETAILS,
    ENDPOINT_ENV_BENEFITS,
    ENDPOINT_INVENTORY,
    ENDPOINT_OVERVIEW,
    ENDPOINT_POWER,
    ENDPOINT_POWER_DETAILS,
    ENDPOINT_POWER_FLOW,
)
from pysolaredge.models._base import ApiTimestamp, MeterSeries, SolarEdgeBaseModel, TimeValue, parse_api_timestamp
from pysolaredge.models.energy import EnergyDetails, EnergyDetailsResponse, EnergyResponse, EnergySeries
from pysolaredge.models.power import (
    FlowConnection,
    FlowNode,
    PowerDetails,
    PowerDetailsResponse,
    PowerFlow,
    PowerFlowResponse,
    PowerResponse,
    PowerSeries,
)
from pysolaredge.models.site import (
    CurrentPower,
    EnergyAmount,
    EnvBenefits,
    EnvBenefitsResponse,
    GasEmissionSaved,
    Inventory,
    InventoryResponse,
    Inverter,
    OverviewResponse,
    SiteDetails,
    SiteDetailsResponse,
    SiteLocation,
    SiteOverview,
)

#: Envelope model per endpoint.  Payloads of endpoints not listed here are
#: passed through unvalidated.
RESPONSE_MODELS: dict[str, type[SolarEdgeBaseModel]] = {
    ENDPOINT_DETAILS: SiteDetailsResponse,
    ENDPOINT_OVERVIEW: OverviewResponse,
    ENDPOINT_POWER: PowerResponse,
    ENDPOINT_ENERGY: EnergyResponse,
    ENDPOINT_ENERGY_DETAILS: EnergyDetailsResponse,
    ENDPOINT_POWER_FLOW: PowerFlowResponse,
    ENDPOINT_ENV_BENEFITS: EnvBenefitsResponse,
    ENDPOINT_INVENTORY: InventoryResponse,
    ENDPOINT_POWER_DETAILS: PowerDetailsResponse,
}


def validate_payload(endpoint: str, payload: Any) -> SolarEdgeBaseModel | None:
    """Validate *payload* against the envelope model for *endpoint*.

    Returns the parsed model, or ``None`` for endpoints without a schema.
    Raises :class:`pydantic.ValidationError` on a shape mismatch.
    """
    model = RESPONSE_MODELS.get(endpoint)
    if model is None:
        return None
    return model.model_validate(payload)


__all__ = [
    "ApiTimestamp",
    "CurrentPower",
    "EnergyAmount",
    "EnergyDetails",
    "EnergyDetailsResponse",
    "EnergyResponse",
    "EnergySeries",
    "EnvBenefits",
    "EnvBenefitsResponse",
    "FlowConnection",
    "FlowNode",
    "GasEmissionSaved",
    "Inventory",
    "InventoryResponse",
    "Inverter",
    "MeterSeries",
    "OverviewResponse",
    "PowerDetails",
    "PowerDetailsResponse",
    "PowerFlow",
    "PowerFlowResponse",
    "PowerResponse",
    "PowerSeries",
    "RESPONSE_MODELS",
    "SiteDetails",
    "SiteDetailsResponse",
    "SiteLocation",
    "SiteOverview",
    "SolarEdgeBaseModel",
    "TimeValue",
    "parse_api_timestamp",
    "validate_payload",
]
