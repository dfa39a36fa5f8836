"""Base model for SolarEdge API responses.

Every response model inherits from :class:`SolarEdgeBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``null`` values so the
  field default is used.
* A ``raw`` dict that captures the original payload.

Timestamps in SolarEdge payloads are local-time strings in the
``YYYY-MM-DD HH:MM:SS`` form; :data:`ApiTimestamp` parses them into naive
datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from pysolaredge._constants import API_TIME_FORMAT


def parse_api_timestamp(value: Any) -> datetime | None:
    """Convert a SolarEdge ``YYYY-MM-DD HH:MM:SS`` string to a datetime.

    Plain dates (``YYYY-MM-DD``) are accepted too.  Returns ``None`` for
    empty values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    try:
        return datetime.strptime(text, API_TIME_FORMAT)
    except ValueError:
        return datetime.fromisoformat(text)


ApiTimestamp = Annotated[datetime | None, BeforeValidator(parse_api_timestamp)]
"""Annotated type that coerces SolarEdge timestamp strings to datetimes."""


class SolarEdgeBaseModel(BaseModel):
    """Base for SolarEdge API response models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * ``null`` values → dropped so the field default is used instead
    * Stashes the original API dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``null`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Keep an explicitly passed raw= when constructing from kwargs.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class TimeValue(SolarEdgeBaseModel):
    """One point of a time series.  ``value`` is ``None`` for gaps."""

    date: ApiTimestamp = None
    value: float | None = None


class MeterSeries(SolarEdgeBaseModel):
    """Time series for one meter (``Production``, ``Purchased`` ...)."""

    type: str = ""
    values: list[TimeValue] = Field(default_factory=list)
