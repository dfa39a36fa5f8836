"""Helpers for safe debug logging.

Every SolarEdge request carries the site's API key as the ``api_key`` query
parameter, so it shows up in parameter mappings, in request URLs and in
aiohttp error messages that quote the URL.  Everything logged or put into
an exception message goes through here first.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_REDACTED = "<redacted>"

_SENSITIVE_PARAMS: frozenset[str] = frozenset({"api_key", "apikey"})

_KEY_IN_QUERY = re.compile(r"((?:api_key|apikey)=)[^&#\s'\"]+", re.IGNORECASE)


def redact_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of the query *params* with the API key masked."""
    return {key: _REDACTED if key.lower() in _SENSITIVE_PARAMS else value for key, value in params.items()}


def redact_text(text: str, *, max_length: int = 512) -> str:
    """Mask ``api_key=...`` inside *text* and trim it to *max_length* characters.

    Used for URLs, error messages and response body previews.
    """
    masked = _KEY_IN_QUERY.sub(rf"\1{_REDACTED}", text)
    if len(masked) > max_length:
        return f"{masked[:max_length]}…<truncated>"
    return masked
