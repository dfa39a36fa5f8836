"""High-level async client for the SolarEdge monitoring API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

import aiohttp

from pysolaredge._constants import (
    ENDPOINT_DETAILS,
    ENDPOINT_ENERGY_DETAILS,
    ENDPOINT_ENV_BENEFITS,
    ENDPOINT_INVENTORY,
    ENDPOINT_OVERVIEW,
    ENDPOINT_POWER,
    ENDPOINT_POWER_DETAILS,
    ENDPOINT_POWER_FLOW,
    ENERGY_METERS,
    POWER_DETAILS_METERS,
    format_api_time,
)
from pysolaredge._transport import HttpTransport, Transport
from pysolaredge.cache import RequestParams
from pysolaredge.cached_client import CachedApiClient
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.exceptions import SolarEdgeError
from pysolaredge.models import (
    EnergyDetailsResponse,
    EnvBenefitsResponse,
    InventoryResponse,
    OverviewResponse,
    PowerDetailsResponse,
    PowerFlowResponse,
    PowerResponse,
    SiteDetailsResponse,
    SolarEdgeBaseModel,
)
from pysolaredge.storage import JsonFileStore, KeyValueStore, MemoryStore

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SolarEdgeBaseModel)

TimeArg = datetime | str


class SolarEdgeClient:
    """Async client for one SolarEdge site.

    Usage::

        async with SolarEdgeClient(config) as client:
            overview = await client.get_overview()

    Every call goes through a :class:`CachedApiClient`, so repeated calls
    inside an endpoint's TTL, and calls during a rate-limit cooldown, are
    answered from the cache.
    """

    def __init__(
        self,
        config: SolarEdgeConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        store: KeyValueStore | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        if store is None:
            store = JsonFileStore(config.cache_path) if config.cache_path else MemoryStore()
        self._store = store
        self._custom_transport = transport
        self._api: CachedApiClient | None = None
        if transport is not None:
            self._api = self._build_api(transport)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SolarEdgeClient:
        if self._custom_transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._api = self._build_api(HttpTransport(self._config, self._http_session))
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._custom_transport is None:
            self._api = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_api(self, transport: Transport) -> CachedApiClient:
        return CachedApiClient(
            self._store,
            transport,
            ttls=self._config.cache_ttls,
            rate_limit_cooldown=self._config.rate_limit_cooldown,
        )

    @property
    def config(self) -> SolarEdgeConfig:
        return self._config

    @property
    def api(self) -> CachedApiClient:
        if self._api is None:
            raise SolarEdgeError("Client not initialized. Use 'async with SolarEdgeClient(...) as client:'")
        return self._api

    async def fetch(self, endpoint: str, params: RequestParams | None = None, *, force: bool = False) -> Any:
        """Return the raw JSON payload for *endpoint*."""
        return await self.api.get(endpoint, params, force=force)

    async def _fetch_model(
        self,
        model: type[M],
        endpoint: str,
        params: RequestParams | None = None,
        *,
        force: bool = False,
    ) -> M:
        payload = await self.fetch(endpoint, params, force=force)
        return model.model_validate(payload)

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    @property
    def blocked_until(self) -> datetime | None:
        return self.api.blocked_until

    def force_refresh(self) -> None:
        """Drop any cooldown and bypass the cache on the next request."""
        self.api.reset_rate_limit()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_details(self, *, force: bool = False) -> SiteDetailsResponse:
        return await self._fetch_model(SiteDetailsResponse, ENDPOINT_DETAILS, force=force)

    async def get_overview(self, *, force: bool = False) -> OverviewResponse:
        return await self._fetch_model(OverviewResponse, ENDPOINT_OVERVIEW, force=force)

    async def get_power(self, start: TimeArg, end: TimeArg, *, force: bool = False) -> PowerResponse:
        """Quarter-hourly site power between *start* and *end* (max one month)."""
        params = {"startTime": format_api_time(start), "endTime": format_api_time(end)}
        return await self._fetch_model(PowerResponse, ENDPOINT_POWER, params, force=force)

    async def get_energy(
        self,
        start: TimeArg,
        end: TimeArg,
        time_unit: str = "DAY",
        *,
        force: bool = False,
    ) -> EnergyDetailsResponse:
        """Production and purchased energy per *time_unit*."""
        params = {
            "startTime": format_api_time(start),
            "endTime": format_api_time(end),
            "timeUnit": time_unit,
            "meters": ENERGY_METERS,
        }
        return await self._fetch_model(EnergyDetailsResponse, ENDPOINT_ENERGY_DETAILS, params, force=force)

    async def get_power_flow(self, *, force: bool = False) -> PowerFlowResponse:
        return await self._fetch_model(PowerFlowResponse, ENDPOINT_POWER_FLOW, force=force)

    async def get_env_benefits(self, *, force: bool = False) -> EnvBenefitsResponse:
        return await self._fetch_model(EnvBenefitsResponse, ENDPOINT_ENV_BENEFITS, force=force)

    async def get_inventory(self, *, force: bool = False) -> InventoryResponse:
        return await self._fetch_model(InventoryResponse, ENDPOINT_INVENTORY, force=force)

    async def get_power_details(self, start: TimeArg, end: TimeArg, *, force: bool = False) -> PowerDetailsResponse:
        """Production, consumption and purchased power between *start* and *end*."""
        params = {
            "startTime": format_api_time(start),
            "endTime": format_api_time(end),
            "meters": POWER_DETAILS_METERS,
        }
        return await self._fetch_model(PowerDetailsResponse, ENDPOINT_POWER_DETAILS, params, force=force)
