"""Client configuration for pysolaredge."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pysolaredge._constants import BASE_URL, DEFAULT_RATE_LIMIT_COOLDOWN, DEV_PROXY_URL
from pysolaredge.exceptions import SolarEdgeConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise SolarEdgeConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class SolarEdgeConfig:
    """Client configuration.

    Parameters
    ----------
    api_key : str
        SolarEdge monitoring API key for the site.
    site_id : str
        Numeric site identifier, as a string.
    base_url : str
        API base URL. Defaults to the production monitoring host; point it
        at a same-origin development proxy to route through one.
    request_timeout : float
        Total timeout for a single HTTP request, in seconds.
    rate_limit_cooldown : float
        Seconds during which all live calls are suppressed after the API
        answers HTTP 429.  Defaults to one hour.
    cache_ttls : mapping of str to float
        Per-endpoint freshness overrides in seconds.  Endpoints not listed
        keep the built-in TTL.
    cache_path : str or None
        Path of the JSON file backing the persistent cache.  ``None`` keeps
        the cache in memory only.
    poll_interval : float
        Seconds between dashboard refreshes when polling.
    """

    api_key: str
    site_id: str
    base_url: str = BASE_URL
    request_timeout: float = 30.0
    rate_limit_cooldown: float = DEFAULT_RATE_LIMIT_COOLDOWN
    cache_ttls: Mapping[str, float] = dataclasses.field(default_factory=dict)
    cache_path: str | None = None
    poll_interval: float = 15 * 60.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise SolarEdgeConfigError("api_key is required")
        if not str(self.site_id).strip():
            raise SolarEdgeConfigError("site_id is required")
        if self.rate_limit_cooldown < 0:
            raise SolarEdgeConfigError("rate_limit_cooldown must not be negative")
        # Accept integer site ids from callers.
        object.__setattr__(self, "site_id", str(self.site_id).strip())
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> SolarEdgeConfig:
        """Create configuration from environment variables.

        Reads ``SOLAREDGE_API_KEY``, ``SOLAREDGE_SITE_ID`` and the optional
        ``SOLAREDGE_*`` variables.  Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SolarEdgeConfig
            Populated configuration.

        Raises
        ------
        SolarEdgeConfigError
            If the API key or site id is missing, or a numeric variable
            cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SOLAREDGE_API_KEY": "api_key",
            "SOLAREDGE_SITE_ID": "site_id",
            "SOLAREDGE_BASE_URL": "base_url",
            "SOLAREDGE_CACHE_PATH": "cache_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "SOLAREDGE_REQUEST_TIMEOUT": "request_timeout",
            "SOLAREDGE_RATE_LIMIT_COOLDOWN": "rate_limit_cooldown",
            "SOLAREDGE_POLL_INTERVAL": "poll_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            number = _env_float(env, env_key)
            if number is not None and field_name not in overrides:
                config_kwargs[field_name] = number

        # Development proxy wins over SOLAREDGE_BASE_URL, not over an explicit base_url.
        if _env_bool(env.get("SOLAREDGE_DEV_PROXY"), False) and "base_url" not in overrides:
            config_kwargs["base_url"] = env.get("SOLAREDGE_PROXY_URL", DEV_PROXY_URL)

        config_kwargs.update(overrides)

        if not config_kwargs.get("api_key"):
            raise SolarEdgeConfigError("SOLAREDGE_API_KEY is not set")
        if not config_kwargs.get("site_id"):
            raise SolarEdgeConfigError("SOLAREDGE_SITE_ID is not set")

        return cls(**config_kwargs)
