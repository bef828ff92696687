"""Adaptive polling scheduler.

The wait before each poll depends on the current regime:

* ``ACTIVE``: a build is queued or running, poll often;
* ``RECENT``: a status changed within the recent-change window;
* ``IDLE``: nothing is happening, poll rarely.

The regime is re-derived from the engine state and the change detector's
clock right before every wait, so there is no separate demotion timer.

Stopping interrupts the wait immediately. A refresh that is already in flight
is allowed to finish and apply its results, but no events are delivered and
no further poll starts once the stop has been observed.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol

import structlog

from deploy_status.config.models import Settings
from deploy_status.sync.changes import ChangeDetector, DeploymentEvent
from deploy_status.sync.engine import SyncEngine, utc_now

logger = structlog.get_logger(__name__)


class Regime(str, Enum):
    ACTIVE = "active"
    RECENT = "recent"
    IDLE = "idle"


class NotificationDispatcher(Protocol):
    def deliver(self, event: DeploymentEvent) -> None: ...


def select_regime(
    has_active_builds: bool,
    last_change_at: float | None,
    now: float,
    recent_window: float,
) -> Regime:
    if has_active_builds:
        return Regime.ACTIVE
    if last_change_at is not None and now - last_change_at < recent_window:
        return Regime.RECENT
    return Regime.IDLE


class PollingScheduler:
    """Drives :meth:`SyncEngine.refresh_all` on an activity-dependent interval."""

    def __init__(
        self,
        engine: SyncEngine,
        detector: ChangeDetector | None = None,
        dispatcher: NotificationDispatcher | None = None,
        *,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.engine = engine
        self.detector = detector or ChangeDetector(clock=clock)
        self.dispatcher = dispatcher
        self.settings = settings or engine.settings
        self._clock = clock
        self._wall_clock = wall_clock
        self._task: asyncio.Task[None] | None = None
        self._stop = asyncio.Event()
        self.next_poll_at: datetime | None = None
        self.poll_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stop.is_set()

    @property
    def regime(self) -> Regime:
        return select_regime(
            self.engine.has_active_builds,
            self.detector.last_change_at,
            self._clock(),
            self.settings.recent_change_window,
        )

    def interval_for(self, regime: Regime) -> float:
        return {
            Regime.ACTIVE: self.settings.active_interval,
            Regime.RECENT: self.settings.recent_interval,
            Regime.IDLE: self.settings.idle_interval,
        }[regime]

    @property
    def current_interval(self) -> float:
        return self.interval_for(self.regime)

    def start(self, *, immediate: bool = False) -> None:
        """Start the polling loop. Does nothing if it is already running.

        With *immediate*, the first poll happens right away instead of after
        the first interval.
        """
        if self.is_running:
            return
        self._stop = asyncio.Event()
        self.detector.prime(self.engine.projects)
        self._task = asyncio.create_task(
            self._run(self._stop, immediate), name="deploy-status-poller",
        )
        logger.info("polling started")

    def stop(self) -> None:
        """Stop polling. The pending wait is interrupted right away."""
        self._stop.set()
        self.next_poll_at = None
        if self._task is not None:
            logger.info("polling stopped")

    async def join(self) -> None:
        """Wait for the loop to exit after :meth:`stop`."""
        if self._task is not None:
            await self._task
            self._task = None

    async def aclose(self) -> None:
        self.stop()
        await self.join()

    async def poll_now(self) -> list[DeploymentEvent]:
        """Refresh and notify immediately, without touching the regime."""
        await self.engine.refresh_all()
        return self._detect_and_notify()

    async def _run(self, stop: asyncio.Event, immediate: bool) -> None:
        try:
            if immediate and not stop.is_set():
                await self._cycle(stop)
            while not stop.is_set():
                regime = self.regime
                interval = self.interval_for(regime)
                self.next_poll_at = self._wall_clock() + timedelta(seconds=interval)
                logger.debug("next poll scheduled", regime=regime.value, interval=interval)
                if await _wait(stop, interval):
                    break
                await self._cycle(stop)
        finally:
            if stop is self._stop:
                self.next_poll_at = None

    async def _cycle(self, stop: asyncio.Event) -> None:
        await self.engine.refresh_all()
        if stop.is_set():
            return
        self._detect_and_notify()

    def _detect_and_notify(self) -> list[DeploymentEvent]:
        self.poll_count += 1
        events = self.detector.detect(self.engine.projects)
        for event in events:
            self._deliver(event)
        return events

    def _deliver(self, event: DeploymentEvent) -> None:
        if self.dispatcher is None:
            return
        # Delivery is best effort: a broken notifier must not stop polling
        try:
            self.dispatcher.deliver(event)
        except Exception:
            logger.warning("notification delivery failed", event=event.identifier, exc_info=True)


async def _wait(stop: asyncio.Event, timeout: float) -> bool:
    """Wait up to *timeout* seconds; return True if *stop* was set meanwhile."""
    try:
        await asyncio.wait_for(stop.wait(), timeout)
    except asyncio.TimeoutError:
        return stop.is_set()
    return True
