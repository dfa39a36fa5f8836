"""pysolaredge - Async Python client for the SolarEdge monitoring API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysolaredge")
except PackageNotFoundError:
    __version__ = "0+local"
from pysolaredge._constants import CACHE_TTLS, DEFAULT_RATE_LIMIT_COOLDOWN, format_api_time
from pysolaredge.cache import CacheEntry, ResponseCache, cache_key, last_success_key
from pysolaredge.cached_client import CachedApiClient
from pysolaredge.client import SolarEdgeClient
from pysolaredge.config import SolarEdgeConfig
from pysolaredge.dashboard import ConnectionStatus, DashboardSnapshot, load_dashboard
from pysolaredge.exceptions import (
    ApiError,
    RateLimitError,
    SolarEdgeConfigError,
    SolarEdgeError,
    StorageError,
    TransportError,
)
from pysolaredge.poller import DashboardPoller
from pysolaredge.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "__version__",
    "ApiError",
    "CACHE_TTLS",
    "CacheEntry",
    "CachedApiClient",
    "ConnectionStatus",
    "DEFAULT_RATE_LIMIT_COOLDOWN",
    "DashboardPoller",
    "DashboardSnapshot",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RateLimitError",
    "ResponseCache",
    "SolarEdgeClient",
    "SolarEdgeConfig",
    "SolarEdgeConfigError",
    "SolarEdgeError",
    "StorageError",
    "TransportError",
    "cache_key",
    "format_api_time",
    "last_success_key",
    "load_dashboard",
]
