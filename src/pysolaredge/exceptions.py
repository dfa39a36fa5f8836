"""Custom exception hierarchy for pysolaredge."""

from __future__ import annotations

from datetime import datetime


class SolarEdgeError(Exception):
    """Base exception for all pysolaredge errors."""


class SolarEdgeConfigError(SolarEdgeError):
    """Invalid or missing configuration."""


class StorageError(SolarEdgeError):
    """Persistent key/value store could not be written."""


class ApiError(SolarEdgeError):
    """No usable data for a request: live, cached or last-known-good.

    This is the terminal signal surfaced by
    :meth:`pysolaredge.cached_client.CachedApiClient.get`.  The concrete
    subclasses say why the live fetch failed.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class TransportError(ApiError):
    """HTTP-level failure (network, non-2xx, non-JSON, unexpected shape)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(message, endpoint=endpoint)


class RateLimitError(ApiError):
    """The provider rejected the call with HTTP 429, or a cooldown is active.

    ``blocked_until`` is the UTC deadline of the cooldown when known.
    """

    def __init__(
        self,
        message: str,
        *,
        blocked_until: datetime | None = None,
        endpoint: str = "",
    ) -> None:
        self.blocked_until = blocked_until
        super().__init__(message, endpoint=endpoint)
