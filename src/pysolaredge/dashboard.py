"""Dashboard data loading.

Fans out every endpoint a dashboard needs, applies the light key renaming
the presentation layer expects, and classifies the connection as online,
throttled or offline.  When throttled with nothing to show, placeholder
data is substituted and the snapshot is flagged with ``is_demo``.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from pysolaredge._constants import (
    ENDPOINT_ENERGY_DETAILS,
    ENDPOINT_ENV_BENEFITS,
    ENDPOINT_INVENTORY,
    ENDPOINT_OVERVIEW,
    ENDPOINT_POWER_DETAILS,
    ENDPOINT_POWER_FLOW,
    ENERGY_METERS,
    POWER_DETAILS_METERS,
)
from pysolaredge.client import SolarEdgeClient
from pysolaredge.exceptions import ApiError, RateLimitError

_logger = logging.getLogger(__name__)


class ConnectionStatus(enum.StrEnum):
    ONLINE = "online"
    THROTTLED = "throttled"
    OFFLINE = "offline"


@dataclass
class DashboardSnapshot:
    """Everything one dashboard refresh produced.

    ``errors`` maps the section name to the :class:`ApiError` that left it
    empty.  ``is_demo`` is ``True`` whenever any section holds placeholder
    data instead of API data.
    """

    day: date
    overview: dict[str, Any] = field(default_factory=dict)
    power_flow: dict[str, Any] = field(default_factory=dict)
    env_benefits: dict[str, Any] = field(default_factory=dict)
    inventory: dict[str, Any] = field(default_factory=lambda: {"inverters": []})
    power_details: dict[str, Any] = field(default_factory=dict)
    energy_30d: list[dict[str, Any]] = field(default_factory=list)
    energy_12m: list[dict[str, Any]] = field(default_factory=list)
    status: ConnectionStatus = ConnectionStatus.ONLINE
    is_demo: bool = False
    blocked_until: datetime | None = None
    updated_at: datetime = field(default_factory=datetime.now)
    errors: dict[str, ApiError] = field(default_factory=dict)


# ------------------------------------------------------------------
# Light field renaming
# ------------------------------------------------------------------


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def rename_overview(payload: Any) -> dict[str, Any]:
    return _as_dict(_as_dict(payload).get("overview"))


def rename_power_flow(payload: Any) -> dict[str, Any]:
    raw_flow = _as_dict(_as_dict(payload).get("siteCurrentPowerFlow"))
    return {
        "unit": raw_flow.get("unit"),
        "pv": _as_dict(raw_flow.get("PV")),
        "grid": _as_dict(raw_flow.get("GRID")),
        "load": _as_dict(raw_flow.get("LOAD")),
        "connections": raw_flow.get("connections") or [],
    }


def rename_env_benefits(payload: Any) -> dict[str, Any]:
    return _as_dict(_as_dict(payload).get("envBenefits"))


def rename_inventory(payload: Any) -> dict[str, Any]:
    inventory = _as_dict(payload).get("Inventory")
    return inventory if isinstance(inventory, dict) else {"inverters": []}


def rename_energy(payload: Any) -> list[dict[str, Any]]:
    meters = _as_dict(_as_dict(payload).get("energyDetails")).get("meters")
    return meters if isinstance(meters, list) else []


# ------------------------------------------------------------------
# Date ranges
# ------------------------------------------------------------------


def _day_range(day: date) -> tuple[str, str]:
    return f"{day.isoformat()} 00:00:00", f"{day.isoformat()} 23:59:59"


def thirty_day_start(today: date) -> date:
    """First day of the 30-day window ending *today* (inclusive)."""
    return today - timedelta(days=29)


def twelve_month_start(today: date) -> date:
    """First day of the month eleven months before *today*."""
    months = today.year * 12 + (today.month - 1) - 11
    return date(months // 12, months % 12 + 1, 1)


# ------------------------------------------------------------------
# Placeholder data
# ------------------------------------------------------------------


def demo_overview() -> dict[str, Any]:
    return {
        "lastDayData": {"energy": 45200},
        "lastMonthData": {"energy": 1250000},
        "lifeTimeData": {"energy": 15400000},
        "currentPower": {"power": 5200},
    }


def demo_power_flow() -> dict[str, Any]:
    return {
        "unit": "W",
        "pv": {"currentPower": 5200},
        "grid": {"currentPower": 1200},
        "load": {"currentPower": 4000},
        "connections": [{"from": "PV", "to": "LOAD"}, {"from": "GRID", "to": "LOAD"}],
    }


def demo_power_details(day: date) -> dict[str, Any]:
    """A synthetic quarter-hourly production/consumption curve for *day*."""
    production: list[dict[str, Any]] = []
    consumption: list[dict[str, Any]] = []
    purchased: list[dict[str, Any]] = []
    for slot in range(96):
        stamp = f"{day.isoformat()} {slot // 4:02d}:{(slot % 4) * 15:02d}:00"
        prod = math.sin((slot - 28) / 40 * math.pi) * 7000 if 28 < slot < 68 else 0.0
        load = 2500 + 1000 * math.sin(slot / 96 * 2 * math.pi)
        production.append({"date": stamp, "value": prod})
        consumption.append({"date": stamp, "value": load})
        purchased.append({"date": stamp, "value": max(0.0, load - prod)})
    return {
        "powerDetails": {
            "meters": [
                {"type": "Production", "values": production},
                {"type": "Consumption", "values": consumption},
                {"type": "Purchased", "values": purchased},
            ]
        }
    }


def _fill_demo_data(snapshot: DashboardSnapshot) -> None:
    if not snapshot.overview:
        snapshot.overview = demo_overview()
    if not snapshot.power_flow:
        snapshot.power_flow = demo_power_flow()
    if not snapshot.power_details.get("powerDetails"):
        snapshot.power_details = demo_power_details(snapshot.day)
    snapshot.is_demo = True


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------


async def load_dashboard(
    client: SolarEdgeClient,
    day: date | None = None,
    *,
    today: date | None = None,
    force: bool = False,
) -> DashboardSnapshot:
    """Fetch every dashboard section concurrently.

    Parameters
    ----------
    client : SolarEdgeClient
        An initialized client.
    day : date, optional
        Day shown in the power chart; defaults to *today*.
    today : date, optional
        Anchor of the 30-day and 12-month energy windows.  Defaults to the
        current local date.
    force : bool
        Bypass cache freshness for every section.

    Returns
    -------
    DashboardSnapshot
        Sections that failed stay empty and are listed in ``errors``.
    """
    today = today or date.today()
    day = day or today
    start_day, end_day = _day_range(day)

    requests: dict[str, tuple[str, dict[str, Any]]] = {
        "overview": (ENDPOINT_OVERVIEW, {}),
        "power_flow": (ENDPOINT_POWER_FLOW, {}),
        "env_benefits": (ENDPOINT_ENV_BENEFITS, {}),
        "inventory": (ENDPOINT_INVENTORY, {}),
        "power_details": (
            ENDPOINT_POWER_DETAILS,
            {"startTime": start_day, "endTime": end_day, "meters": POWER_DETAILS_METERS},
        ),
        "energy_30d": (
            ENDPOINT_ENERGY_DETAILS,
            {
                "startTime": _day_range(thirty_day_start(today))[0],
                "endTime": end_day,
                "timeUnit": "DAY",
                "meters": ENERGY_METERS,
            },
        ),
        "energy_12m": (
            ENDPOINT_ENERGY_DETAILS,
            {
                "startTime": _day_range(twelve_month_start(today))[0],
                "endTime": end_day,
                "timeUnit": "MONTH",
                "meters": ENERGY_METERS,
            },
        ),
    }
    renamers = {
        "overview": rename_overview,
        "power_flow": rename_power_flow,
        "env_benefits": rename_env_benefits,
        "inventory": rename_inventory,
        "power_details": _as_dict,
        "energy_30d": rename_energy,
        "energy_12m": rename_energy,
    }

    results = await asyncio.gather(
        *(client.fetch(endpoint, params, force=force) for endpoint, params in requests.values()),
        return_exceptions=True,
    )

    snapshot = DashboardSnapshot(day=day)
    for section, result in zip(requests, results, strict=True):
        if isinstance(result, ApiError):
            snapshot.errors[section] = result
            continue
        if isinstance(result, BaseException):
            raise result
        setattr(snapshot, section, renamers[section](result))

    # Cached answers during a cooldown still count as throttled.
    snapshot.blocked_until = client.blocked_until
    throttled = snapshot.blocked_until is not None or any(
        isinstance(err, RateLimitError) for err in snapshot.errors.values()
    )
    if throttled:
        snapshot.status = ConnectionStatus.THROTTLED
        if not snapshot.overview or not snapshot.power_details.get("powerDetails"):
            _fill_demo_data(snapshot)
            _logger.info("Throttled with no cached data; showing demo data")
    elif snapshot.errors:
        snapshot.status = ConnectionStatus.OFFLINE
        for section, err in snapshot.errors.items():
            _logger.error("Error loading %s: %s", section, err)

    snapshot.updated_at = datetime.now()
    return snapshot


# ------------------------------------------------------------------
# Presentation helpers
# ------------------------------------------------------------------


def status_text(snapshot: DashboardSnapshot) -> str:
    if snapshot.status is ConnectionStatus.THROTTLED:
        if snapshot.blocked_until is not None:
            return f"Throttled (until {snapshot.blocked_until.astimezone().strftime('%H:%M')})"
        return "Rate Limited"
    return "Online" if snapshot.status is ConnectionStatus.ONLINE else "Offline"


def inverter_summary(inventory: dict[str, Any]) -> str:
    """``"online/total"`` for the inverters in a renamed inventory."""
    inverters = inventory.get("inverters") or []
    online = sum(1 for inverter in inverters if str(inverter.get("status")) == "1")
    return f"{online}/{len(inverters)}"
