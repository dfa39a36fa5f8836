#!/usr/bin/env python3
"""Dump everything the dashboard loads for a SolarEdge site.

Runs one dashboard refresh through the caching client and prints the
connection status plus every section, so you can see what would be
rendered and whether it came from live data, the cache or the demo
placeholders.

Usage
-----
Set environment variables and run::

    export SOLAREDGE_API_KEY="..."
    export SOLAREDGE_SITE_ID="1234567"
    python scripts/dump_site.py

Options::

    --day YYYY-MM-DD    Day for the power chart (default: today)
    --cache FILE        Persist the cache in FILE (default: SOLAREDGE_CACHE_PATH)
    --force             Clear any rate-limit cooldown and bypass the cache
    --json              Output as machine-readable JSON
    --output FILE       Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysolaredge import SolarEdgeClient, SolarEdgeConfig, load_dashboard  # noqa: E402
from pysolaredge.dashboard import DashboardSnapshot, inverter_summary, status_text  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _snapshot_to_dict(snapshot: DashboardSnapshot) -> dict[str, Any]:
    return {
        "day": snapshot.day.isoformat(),
        "status": snapshot.status.value,
        "status_text": status_text(snapshot),
        "is_demo": snapshot.is_demo,
        "blocked_until": snapshot.blocked_until.isoformat() if snapshot.blocked_until else None,
        "updated_at": snapshot.updated_at.isoformat(),
        "errors": {section: str(err) for section, err in snapshot.errors.items()},
        "overview": snapshot.overview,
        "power_flow": snapshot.power_flow,
        "env_benefits": snapshot.env_benefits,
        "inventory": snapshot.inventory,
        "power_details": snapshot.power_details,
        "energy_30d": snapshot.energy_30d,
        "energy_12m": snapshot.energy_12m,
    }


def _format_text(snapshot: DashboardSnapshot) -> str:
    out: list[str] = [_section("pysolaredge dump_site")]
    out.append(f"  day       : {snapshot.day.isoformat()}")
    out.append(f"  status    : {status_text(snapshot)}")
    out.append(f"  inverters : {inverter_summary(snapshot.inventory)}")
    if snapshot.is_demo:
        out.append("  NOTE      : demo data shown, no real data available")
    for section, err in snapshot.errors.items():
        out.append(f"  error     : {section}: {err}")

    for name in ("overview", "power_flow", "env_benefits", "inventory"):
        out.append(_section(name.upper()))
        out.append(json.dumps(getattr(snapshot, name), indent=2, ensure_ascii=False))

    meters = snapshot.power_details.get("powerDetails", {}).get("meters", [])
    out.append(_section("POWER DETAILS"))
    for meter in meters:
        values = [v.get("value") for v in meter.get("values", []) if v.get("value") is not None]
        peak = max(values) if values else 0
        out.append(f"  {meter.get('type', '?'):<12} samples={len(values):<4} peak={peak:.0f}")

    for name, series in (("ENERGY 30 DAYS", snapshot.energy_30d), ("ENERGY 12 MONTHS", snapshot.energy_12m)):
        out.append(_section(name))
        for meter in series:
            total = sum(v.get("value") or 0 for v in meter.get("values", []))
            out.append(f"  {meter.get('type', '?'):<12} total={total / 1000:.1f} kWh")
    return "\n".join(out)


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump SolarEdge dashboard data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--day", type=date.fromisoformat, help="Day for the power chart (default: today)")
    parser.add_argument("--cache", help="Persist the cache in this JSON file")
    parser.add_argument("--force", action="store_true", help="Clear the cooldown and bypass the cache")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.cache:
        overrides["cache_path"] = args.cache
    config = SolarEdgeConfig.from_env(**overrides)

    async with SolarEdgeClient(config) as client:
        if args.force:
            client.force_refresh()
        snapshot = await load_dashboard(client, args.day, force=args.force)

    if args.json_mode:
        payload = json.dumps(_snapshot_to_dict(snapshot), indent=2, default=str, ensure_ascii=False)
    else:
        payload = _format_text(snapshot)

    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
