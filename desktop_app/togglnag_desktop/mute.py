"""Vorübergehendes Stummschalten der Erinnerungen."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional


class MuteWindow:
    """Optionales Stummschaltfenster, das beim nächsten Abfragen abläuft."""

    def __init__(self) -> None:
        self.end: Optional[datetime] = None
        self.total: Optional[timedelta] = None

    def mute(self, duration_minutes: int, now: datetime) -> datetime:
        """Stummschalten bis ``now + duration_minutes``, ersetzt ein laufendes Fenster."""

        if duration_minutes <= 0:
            raise ValueError("Mute duration must be positive")
        self.total = timedelta(minutes=duration_minutes)
        self.end = now + self.total
        return self.end

    def is_active(self, now: datetime) -> bool:
        if self.end is None:
            return False
        if self.end <= now:
            self.clear()
            return False
        return True

    def remaining(self, now: datetime) -> Optional[timedelta]:
        if not self.is_active(now):
            return None
        return self.end - now

    def clear(self) -> None:
        self.end = None
        self.total = None


__all__ = ["MuteWindow"]
