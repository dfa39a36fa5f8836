"""Periodic dashboard refresh."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import date

from pysolaredge.client import SolarEdgeClient
from pysolaredge.dashboard import DashboardSnapshot, load_dashboard

_logger = logging.getLogger(__name__)


class DashboardPoller:
    """Reload the dashboard immediately and then every ``interval`` seconds.

    Cycles are not serialized: a forced :meth:`refresh` may run while a
    timer-triggered cycle is still waiting on the network.  The cache is
    last-write-wins, so the outcome is the same as running them in turn.
    """

    def __init__(
        self,
        client: SolarEdgeClient,
        *,
        interval: float | None = None,
        on_snapshot: Callable[[DashboardSnapshot], None] | None = None,
        day: Callable[[], date] | None = None,
    ) -> None:
        self._client = client
        self._interval = interval if interval is not None else client.config.poll_interval
        self._on_snapshot = on_snapshot
        self._day = day
        self._task: asyncio.Task[None] | None = None
        self.last_snapshot: DashboardSnapshot | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pysolaredge-poller")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def refresh(self, *, force: bool = False) -> DashboardSnapshot:
        """Run one cycle now.  ``force`` clears any cooldown first."""
        if force:
            self._client.force_refresh()
        snapshot = await load_dashboard(
            self._client,
            self._day() if self._day is not None else None,
            force=force,
        )
        self.last_snapshot = snapshot
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)
        return snapshot

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception:
                _logger.exception("Dashboard refresh failed")
            await asyncio.sleep(self._interval)
