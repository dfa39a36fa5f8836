"""Resilient fetch layer: TTL cache, rate-limit cooldown, stale-data fallback.

:class:`CachedApiClient` is the only component that talks to the
monitoring API.  A request is resolved in a fixed order:

1. While a rate-limit cooldown is active, serve the cached payload for the
   exact request, else the endpoint's last successful payload, else fail.
   No network call is made.
2. Serve the cached payload for the exact request if it is younger than
   the endpoint's TTL.
3. Fetch live.  A 429 starts the cooldown; success refreshes both cache
   records and ends any cooldown.
4. If the live fetch failed, serve the endpoint's last successful payload,
   else propagate the failure.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from pysolaredge._constants import CACHE_TTLS, DEFAULT_CACHE_TTL, DEFAULT_RATE_LIMIT_COOLDOWN
from pysolaredge._transport import Transport
from pysolaredge.cache import RequestParams, ResponseCache
from pysolaredge.exceptions import ApiError, RateLimitError, TransportError
from pysolaredge.models import validate_payload
from pysolaredge.storage import KeyValueStore

_logger = logging.getLogger(__name__)


def _ms_to_datetime(value_ms: int) -> datetime:
    return datetime.fromtimestamp(value_ms / 1000.0, tz=UTC)


class CachedApiClient:
    """Resolve ``(endpoint, params)`` into a JSON payload.

    Parameters
    ----------
    store : KeyValueStore
        Durable storage for cache entries and the cooldown deadline.
    transport : Transport
        Performs the actual HTTP request.
    ttls : mapping of str to float, optional
        Per-endpoint freshness overrides in seconds.
    rate_limit_cooldown : float
        Seconds to suppress live calls after an HTTP 429.
    clock : callable
        Returns the current epoch time in seconds.  Injected by tests.
    """

    def __init__(
        self,
        store: KeyValueStore,
        transport: Transport,
        *,
        ttls: Mapping[str, float] | None = None,
        rate_limit_cooldown: float = DEFAULT_RATE_LIMIT_COOLDOWN,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache = ResponseCache(store)
        self._transport = transport
        self._ttls: dict[str, float] = {**CACHE_TTLS, **(ttls or {})}
        self._rate_limit_cooldown = rate_limit_cooldown
        self._clock = clock
        self._force_next = False

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def ttl_for(self, endpoint: str) -> float:
        """Freshness window for *endpoint* in seconds."""
        return self._ttls.get(endpoint, DEFAULT_CACHE_TTL)

    # ------------------------------------------------------------------
    # Rate-limit state
    # ------------------------------------------------------------------

    @property
    def blocked_until(self) -> datetime | None:
        """UTC end of the active cooldown, or ``None`` when not throttled."""
        deadline_ms = self._cache.get_blocked_until_ms()
        if deadline_ms is None or self._now_ms() >= deadline_ms:
            return None
        return _ms_to_datetime(deadline_ms)

    @property
    def is_rate_limited(self) -> bool:
        return self.blocked_until is not None

    def reset_rate_limit(self) -> None:
        """Clear the cooldown and make the next call skip the freshness check.

        Used for a user-triggered "force refresh".
        """
        self._cache.clear_blocked_until()
        self._force_next = True
        _logger.info("Rate-limit state reset; next request goes to the network")

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def get(self, endpoint: str, params: RequestParams | None = None, *, force: bool = False) -> Any:
        """Return the payload for *endpoint* with *params*.

        Parameters
        ----------
        endpoint : str
            Endpoint name, e.g. ``"overview"``.
        params : mapping, optional
            Query parameters besides the API key.
        force : bool
            Skip the freshness check.  An active cooldown still applies.

        Returns
        -------
        Any
            The decoded JSON payload, live or cached.

        Raises
        ------
        ApiError
            When neither live nor cached data is available.  The subclass
            (:class:`RateLimitError` or :class:`TransportError`) tells why
            the live path failed.
        """
        request_params: dict[str, Any] = dict(params or {})
        now_ms = self._now_ms()

        blocked_until_ms = self._cache.get_blocked_until_ms()
        if blocked_until_ms is not None and now_ms < blocked_until_ms:
            return self._serve_while_blocked(endpoint, request_params, blocked_until_ms)

        if self._force_next:
            self._force_next = False
            force = True

        if not force:
            entry = self._cache.get_entry(endpoint, request_params)
            if entry is not None and entry.age_seconds(now_ms) < self.ttl_for(endpoint):
                _logger.debug("Cache hit: %s", endpoint)
                return entry.data

        try:
            return await self._fetch_live(endpoint, request_params)
        except ApiError as exc:
            last = self._cache.get_last_success(endpoint)
            if last is not None:
                _logger.warning("Using last success fallback for %s (%s)", endpoint, exc)
                return last.data
            raise

    def _serve_while_blocked(self, endpoint: str, params: dict[str, Any], blocked_until_ms: int) -> Any:
        entry = self._cache.get_entry(endpoint, params)
        if entry is not None:
            _logger.debug("Throttled - serving cached %s", endpoint)
            return entry.data

        # A new parameter set (e.g. a new day) has no cache of its own yet.
        last = self._cache.get_last_success(endpoint)
        if last is not None:
            _logger.info("Throttled - falling back to last successful %s", endpoint)
            return last.data

        deadline = _ms_to_datetime(blocked_until_ms)
        local_time = deadline.astimezone().strftime("%H:%M:%S")
        raise RateLimitError(
            f"API rate limited until {local_time}",
            blocked_until=deadline,
            endpoint=endpoint,
        )

    async def _fetch_live(self, endpoint: str, params: dict[str, Any]) -> Any:
        _logger.debug("Fetching: %s %s", endpoint, params)
        try:
            payload = await self._transport.get_json(endpoint, params)
        except RateLimitError as exc:
            deadline_ms = self._now_ms() + int(self._rate_limit_cooldown * 1000)
            # Overwrites any earlier deadline.
            self._cache.set_blocked_until_ms(deadline_ms)
            _logger.warning("Rate limited on %s; suppressing live calls for %.0fs", endpoint, self._rate_limit_cooldown)
            raise RateLimitError(
                str(exc) or "API daily limit quota exceeded",
                blocked_until=_ms_to_datetime(deadline_ms),
                endpoint=endpoint,
            ) from exc

        try:
            validate_payload(endpoint, payload)
        except ValidationError as exc:
            raise TransportError(
                f"API request failed: unexpected {endpoint} response shape ({exc.error_count()} errors)",
                endpoint=endpoint,
            ) from exc

        self._cache.store_success(endpoint, params, payload, self._now_ms())
        self._cache.clear_blocked_until()
        return payload
