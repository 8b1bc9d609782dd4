"""Client-side session monitor.

Keeps the user informed before the server drops an idle session: tracks
activity locally, polls the server for liveness, shows a countdown warning
with extend/end choices, and forces a reload once the session is gone.

States: MONITORING <-> WARNING -> EXPIRED. WARNING returns to MONITORING only
through a successful extension (or fresh activity); EXPIRED is terminal.
"""

import asyncio
import math
import time
from collections.abc import Callable, MutableMapping
from typing import Any

import structlog

from poportal.monitor.client import LivenessClient
from poportal.monitor.models import ActivitySignal, ExpiryReason, MonitorSettings, MonitorState
from poportal.monitor.presenter import LoggingPresenter, Presenter
from poportal.monitor.timers import TimerSlot

logger = structlog.get_logger(__name__)


class SessionMonitor:
    """Activity tracker and expiry prompt driver for one page instance."""

    def __init__(
        self,
        client: LivenessClient,
        settings: MonitorSettings,
        presenter: Presenter | None = None,
        cache: MutableMapping[str, Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._settings = settings
        self._presenter: Presenter = presenter or LoggingPresenter()
        self._cache: MutableMapping[str, Any] = cache if cache is not None else {}
        self._clock = clock

        self.state = MonitorState.MONITORING
        self.expiry_reason: ExpiryReason | None = None
        self._last_activity = clock()
        self._seconds_remaining: int | None = None

        self._check_timer = TimerSlot("session-check")
        self._countdown_timer = TimerSlot("session-countdown")
        self._reload_timer = TimerSlot("session-reload")
        self._background_tasks: set[asyncio.Task[Any]] = set()

    @property
    def seconds_remaining(self) -> int | None:
        """Countdown value while warning, None otherwise."""
        return self._seconds_remaining

    @property
    def countdown_active(self) -> bool:
        return self._countdown_timer.active

    @property
    def checks_active(self) -> bool:
        return self._check_timer.active

    def time_until_expiry(self) -> float:
        """Seconds left before the inactivity timeout, from local activity only."""
        return self._settings.inactivity_timeout - (self._clock() - self._last_activity)

    def start(self) -> None:
        """Run an immediate liveness check, then one every check interval."""
        self._check_timer.schedule(self._run_checks(immediate=True))

    def stop(self) -> None:
        """Tear down every timer, e.g. when the page goes away."""
        self._check_timer.cancel()
        self._countdown_timer.cancel()
        self._reload_timer.cancel()
        for task in list(self._background_tasks):
            task.cancel()

    def record_activity(self, signal: ActivitySignal) -> None:
        """Note user activity. Never blocks; dismisses a pending warning."""
        if self.state is MonitorState.EXPIRED:
            return
        self._last_activity = self._clock()
        if self.state is MonitorState.WARNING:
            logger.debug("session_warning_dismissed_by_activity", signal=signal.value)
            self._return_to_monitoring()

    async def check(self) -> MonitorState:
        """One liveness cycle: ask the server, then compare against the local clock."""
        if self.state is MonitorState.EXPIRED:
            return self.state

        valid = await self._client.check()
        # The countdown may have expired the session while the request was in flight
        if self.state is MonitorState.EXPIRED:
            return self.state
        if not valid:
            self.expire(ExpiryReason.SERVER_REJECTED)
            return self.state

        remaining = self.time_until_expiry()
        if remaining <= 0:
            self.expire(ExpiryReason.INACTIVITY)
        elif remaining <= self._settings.warning_time:
            self._enter_warning(math.ceil(remaining))
        return self.state

    async def extend(self) -> bool:
        """Ask the server to extend the session. Any failure expires the monitor."""
        if self.state is MonitorState.EXPIRED:
            return False

        extended = await self._client.extend()
        if self.state is MonitorState.EXPIRED:
            return False
        if not extended:
            self.expire(ExpiryReason.EXTEND_FAILED)
            return False

        self._last_activity = self._clock()
        self._return_to_monitoring()
        # Fresh check cycle counted from the extension
        self._check_timer.schedule(self._run_checks(immediate=False))
        logger.info("session_extended_by_user")
        return True

    def request_extend(self) -> None:
        """Fire-and-forget variant of extend() for UI callbacks."""
        task = asyncio.create_task(self.extend())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def end_now(self) -> None:
        """User chose to end the session; no server round trip."""
        self.expire(ExpiryReason.USER_ENDED)

    def expire(self, reason: ExpiryReason) -> None:
        """Enter the terminal state: drop local data and schedule a hard reload."""
        if self.state is MonitorState.EXPIRED:
            return
        self.state = MonitorState.EXPIRED
        self.expiry_reason = reason
        self._seconds_remaining = None
        self._countdown_timer.cancel()
        self._check_timer.cancel()
        self._cache.clear()

        logger.info("session_monitor_expired", reason=reason.value)
        self._presenter.hide_warning()
        self._presenter.show_expired()
        self._reload_timer.schedule(self._reload_after_delay())

    def _enter_warning(self, seconds_remaining: int) -> None:
        self._seconds_remaining = seconds_remaining
        if self.state is MonitorState.WARNING:
            # Already warning, resync the countdown with the local clock
            self._presenter.update_countdown(seconds_remaining)
        else:
            self.state = MonitorState.WARNING
            self._presenter.show_warning(seconds_remaining)
        if not self._countdown_timer.active:
            self._countdown_timer.schedule(self._run_countdown())

    def _return_to_monitoring(self) -> None:
        self._countdown_timer.cancel()
        self._seconds_remaining = None
        if self.state is MonitorState.WARNING:
            self.state = MonitorState.MONITORING
            self._presenter.hide_warning()

    async def _run_checks(self, immediate: bool) -> None:
        if immediate:
            await self.check()
        while self.state is not MonitorState.EXPIRED:
            await asyncio.sleep(self._settings.check_interval)
            await self.check()

    async def _run_countdown(self) -> None:
        while self.state is MonitorState.WARNING and self._seconds_remaining is not None:
            await asyncio.sleep(self._settings.tick_interval)
            if self.state is not MonitorState.WARNING or self._seconds_remaining is None:
                return
            if self._seconds_remaining <= 1:
                self.expire(ExpiryReason.COUNTDOWN)
                return
            self._seconds_remaining -= 1
            self._presenter.update_countdown(self._seconds_remaining)

    async def _reload_after_delay(self) -> None:
        await asyncio.sleep(self._settings.reload_delay)
        self._presenter.reload()
