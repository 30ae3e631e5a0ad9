"""Zähler für API-Aufrufe pro Stunde."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

HOURLY_BUDGET = 30
WARNING_THRESHOLD = 25
WINDOW = timedelta(hours=1)


class UsageMeter:
    """Zählt API-Aufrufe in einem einstündigen Fenster.

    Das Budget ist nur ein Hinweis. Aufrufe werden nie blockiert, der Zähler
    wird lediglich angezeigt.
    """

    def __init__(self) -> None:
        self.count = 0
        self.window_start: Optional[datetime] = None

    def record_call(self) -> None:
        self.count += 1

    def maybe_rollover(self, now: datetime) -> bool:
        """Startet oder erneuert das Fenster. Liefert ``True``, wenn zurückgesetzt wurde."""

        if self.window_start is None:
            self.window_start = now
            return False
        if now - self.window_start >= WINDOW:
            self.count = 0
            self.window_start = now
            return True
        return False

    def reset(self) -> None:
        self.count = 0
        self.window_start = None

    @property
    def near_limit(self) -> bool:
        return self.count > WARNING_THRESHOLD


__all__ = ["UsageMeter", "HOURLY_BUDGET", "WARNING_THRESHOLD"]
