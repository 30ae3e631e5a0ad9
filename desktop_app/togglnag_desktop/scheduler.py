"""Prüfrhythmus und Fortschrittsanzeige."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from .models import ProgressInfo
from .mute import MuteWindow

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MINUTES = 5
PROGRESS_TICK_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PollScheduler:
    """Betreibt Prüf- und Fortschrittsschleife auf dem laufenden Event-Loop.

    Die Prüfschleife feuert bei jedem (Neu-)Start sofort und danach einmal pro
    Intervall. Ein neues Intervall verwirft die anstehende Prüfung.
    """

    def __init__(self, on_check: Callable[[], Awaitable[None]], *, mute_window: MuteWindow,
                 on_progress: Optional[Callable[[Optional[ProgressInfo]], None]] = None,
                 interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
                 clock: Callable[[], datetime] = _utcnow) -> None:
        if interval_minutes <= 0:
            raise ValueError("Check interval must be positive")
        self.on_check = on_check
        self.on_progress = on_progress
        self.mute_window = mute_window
        self.interval_minutes = interval_minutes
        self.clock = clock
        self.last_check: Optional[datetime] = None
        self._check_task: Optional[asyncio.Task] = None
        self._progress_task: Optional[asyncio.Task] = None
        self._running_checks: set[asyncio.Task] = set()

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60.0

    @property
    def running(self) -> bool:
        return self._check_task is not None and not self._check_task.done()

    # ------------------------------------------------------------------
    # Lebenszyklus
    # ------------------------------------------------------------------
    def start(self) -> None:
        self._restart_check_loop()
        if self._progress_task is None or self._progress_task.done():
            self._progress_task = asyncio.get_running_loop().create_task(self._progress_loop())

    def set_interval(self, minutes: int) -> None:
        if minutes <= 0:
            raise ValueError("Check interval must be positive")
        self.interval_minutes = minutes
        logger.info("Check interval set to %s min", minutes)
        if self._check_task is not None:
            self._restart_check_loop()

    def stop(self) -> None:
        for task in (self._check_task, self._progress_task):
            if task is not None:
                task.cancel()
        self._check_task = None
        self._progress_task = None

    def _restart_check_loop(self) -> None:
        if self._check_task is not None:
            self._check_task.cancel()
        self._check_task = asyncio.get_running_loop().create_task(self._check_loop())

    # ------------------------------------------------------------------
    # Schleifen
    # ------------------------------------------------------------------
    async def _check_loop(self) -> None:
        while True:
            self.fire()
            await asyncio.sleep(self.interval_seconds)

    def fire(self) -> asyncio.Task:
        """Merkt die Prüfzeit und startet den Prüf-Callback als eigenen Task."""

        self.last_check = self.clock()
        task = asyncio.get_running_loop().create_task(self._run_check())
        self._running_checks.add(task)
        task.add_done_callback(self._running_checks.discard)
        return task

    async def _run_check(self) -> None:
        try:
            await self.on_check()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Check failed")

    async def _progress_loop(self) -> None:
        while True:
            if self.on_progress is not None:
                self.on_progress(self.progress(self.clock()))
            await asyncio.sleep(PROGRESS_TICK_SECONDS)

    # ------------------------------------------------------------------
    # Fortschritt
    # ------------------------------------------------------------------
    def progress(self, now: datetime) -> Optional[ProgressInfo]:
        remaining = self.mute_window.remaining(now)
        if remaining is not None:
            total = self.mute_window.total.total_seconds()
            value = 1.0 - remaining.total_seconds() / total
            minutes = round(remaining.total_seconds() / 60)
            return ProgressInfo(value=min(max(value, 0.0), 1.0), label=f"Muted: {minutes} min left")

        if self.last_check is None:
            return None
        elapsed = (now - self.last_check).total_seconds()
        value = min(max(elapsed / self.interval_seconds, 0.0), 1.0)
        minutes = round(max(self.interval_seconds - elapsed, 0.0) / 60)
        return ProgressInfo(value=value, label=f"Next check: {minutes} min")


__all__ = ["PollScheduler", "DEFAULT_INTERVAL_MINUTES"]
