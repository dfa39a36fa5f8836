"""Persistent response cache layered on a :class:`KeyValueStore`.

Three kinds of records live in the store:

* ``solar_data_{endpoint}_{params}`` - the last payload for one exact
  request, keyed by a canonical serialization of its parameters.
* ``solar_last_success_{endpoint}`` - the last payload for an endpoint,
  whatever the parameters.  Deepest fallback layer.
* ``solar_api_blocked_until`` - epoch-millisecond deadline of the
  rate-limit cooldown.

Entries never expire on their own; freshness is judged by the caller.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from pysolaredge._constants import BLOCKED_UNTIL_KEY, DATA_KEY_PREFIX, LAST_SUCCESS_KEY_PREFIX
from pysolaredge.storage import KeyValueStore

_logger = logging.getLogger(__name__)

RequestParams = Mapping[str, str | int | float]


def canonical_params(params: RequestParams | None) -> str:
    """Serialize *params* deterministically (sorted keys, compact separators)."""
    return json.dumps(dict(params or {}), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def cache_key(endpoint: str, params: RequestParams | None = None) -> str:
    """Storage key for one exact request.

    Parameter order does not affect the key::

        >>> cache_key("power", {"endTime": "b", "startTime": "a"})
        'solar_data_power_{"endTime":"b","startTime":"a"}'
    """
    return f"{DATA_KEY_PREFIX}{endpoint}_{canonical_params(params)}"


def last_success_key(endpoint: str) -> str:
    """Storage key for the endpoint-wide last successful payload."""
    return f"{LAST_SUCCESS_KEY_PREFIX}{endpoint}"


class CacheEntry(BaseModel):
    """A stored payload and the epoch-millisecond time it was fetched."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    data: Any
    timestamp: int

    def age_seconds(self, now_ms: int) -> float:
        return (now_ms - self.timestamp) / 1000.0

    def dumps(self) -> str:
        return self.model_dump_json()


class ResponseCache:
    """Typed view over the raw key/value store."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _read_entry(self, key: str) -> CacheEntry | None:
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Ignoring unreadable cache entry %s", key)
            return None

    def _write_entry(self, key: str, entry: CacheEntry) -> bool:
        current = self._read_entry(key)
        # Timestamps never move backwards for a key.
        if current is not None and current.timestamp > entry.timestamp:
            _logger.debug("Skipping older write for %s (%d < %d)", key, entry.timestamp, current.timestamp)
            return False
        self._store.set(key, entry.dumps())
        return True

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def get_entry(self, endpoint: str, params: RequestParams | None = None) -> CacheEntry | None:
        return self._read_entry(cache_key(endpoint, params))

    def get_last_success(self, endpoint: str) -> CacheEntry | None:
        return self._read_entry(last_success_key(endpoint))

    def store_success(
        self,
        endpoint: str,
        params: RequestParams | None,
        data: Any,
        now_ms: int,
    ) -> CacheEntry:
        """Record a successful fetch under both the exact and endpoint-wide keys."""
        entry = CacheEntry(data=data, timestamp=now_ms)
        self._write_entry(cache_key(endpoint, params), entry)
        self._write_entry(last_success_key(endpoint), entry)
        return entry

    # ------------------------------------------------------------------
    # Rate-limit deadline
    # ------------------------------------------------------------------

    def get_blocked_until_ms(self) -> int | None:
        raw = self._store.get(BLOCKED_UNTIL_KEY)
        if raw is None:
            return None
        try:
            return int(float(raw))
        except (ValueError, OverflowError):
            _logger.warning("Ignoring unreadable rate-limit deadline %r", raw)
            return None

    def set_blocked_until_ms(self, deadline_ms: int) -> None:
        self._store.set(BLOCKED_UNTIL_KEY, str(int(deadline_ms)))

    def clear_blocked_until(self) -> None:
        self._store.remove(BLOCKED_UNTIL_KEY)
