"""HTTP transport for the SolarEdge monitoring API."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pysolaredge._constants import USER_AGENT
from pysolaredge._redact import redact_params, redact_text
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.exceptions import RateLimitError, TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by :class:`CachedApiClient`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        ...


class HttpTransport:
    """aiohttp transport issuing ``GET {base_url}/site/{site_id}/{endpoint}``."""

    def __init__(self, config: SolarEdgeConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def build_url(self, endpoint: str) -> str:
        return f"{self._config.base_url}/site/{self._config.site_id}/{endpoint}"

    def build_query(self, params: Mapping[str, Any]) -> dict[str, str]:
        """Query string parameters: the API key plus every value stringified."""
        query: dict[str, str] = {"api_key": self._config.api_key}
        query.update({key: str(value) for key, value in params.items()})
        return query

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        """Fetch *endpoint* and return the decoded JSON body.

        Raises
        ------
        RateLimitError
            If the API answers HTTP 429.
        TransportError
            On network errors, timeouts, other non-2xx statuses, or a body
            that is not JSON.
        """
        url = self.build_url(endpoint)
        query = self.build_query(params)
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}

        _logger.debug("GET %s params=%s", url, redact_params(query))

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                status = resp.status
                if status == 429:
                    raise RateLimitError("API daily limit quota exceeded", endpoint=endpoint)
                if not 200 <= status < 300:
                    raise TransportError(
                        f"API request failed with status {status} {resp.reason or ''}".rstrip(),
                        status_code=status,
                        endpoint=endpoint,
                    )
                content_type = resp.content_type
                body = await resp.read()
        except (RateLimitError, TransportError):
            raise
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Request to {endpoint} failed: {redact_text(str(exc))}", endpoint=endpoint) from exc

        if "json" not in content_type:
            raise TransportError(
                f"API request failed: expected JSON from {endpoint}, got {content_type or 'no content type'}",
                status_code=status,
                endpoint=endpoint,
            )

        try:
            return json.loads(body)
        except ValueError as exc:
            # Covers JSONDecodeError and UnicodeDecodeError.
            preview = body[:200].decode("utf-8", errors="replace")
            raise TransportError(
                f"Invalid JSON from {endpoint}: {redact_text(preview)}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
