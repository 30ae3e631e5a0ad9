"""Erinnerungslogik: entscheidet, wann nachgefragt wird und was mit der Antwort passiert."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Protocol, Sequence

from .api_client import DEFAULT_BASE_URL, RemoteError, TogglClient
from .models import (ProgressInfo, PromptAction, PromptResult, SessionState,
                     TimeEntry, Workspace)
from .mute import MuteWindow
from .usage import UsageMeter

logger = logging.getLogger(__name__)

DEFAULT_MUTE_MINUTES = 120
SUGGESTION_LIMIT = 10
PROMPT_TITLE = "No Timer Running!"
PROMPT_MESSAGE = "Please enter what you're working on:"


class ConfigurationError(RuntimeError):
    """Kein API-Token oder kein Workspace vorhanden."""


class PartialFailure(RemoteError):
    """Laufender Eintrag gestoppt, der neue konnte aber nicht gestartet werden."""


class Prompt(Protocol):
    async def ask(self, title: str, message: str, suggestions: Sequence[str]) -> PromptResult:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def suggestions_from(entries: Iterable[TimeEntry], limit: int = SUGGESTION_LIMIT) -> list[str]:
    """Eindeutige, nicht leere Beschreibungen in der Reihenfolge ihres ersten Auftretens."""

    seen: dict[str, None] = {}
    for entry in entries:
        if entry.description and entry.description not in seen:
            seen[entry.description] = None
            if len(seen) >= limit:
                break
    return list(seen)


class ReminderController:
    """Hält den Sitzungszustand und reagiert auf Prüfungen und Benutzeraktionen."""

    def __init__(self, prompt: Prompt, *, mute_minutes: int = DEFAULT_MUTE_MINUTES,
                 clock: Callable[[], datetime] = _utcnow) -> None:
        self.prompt = prompt
        self.mute_minutes = mute_minutes
        self.clock = clock
        self.client: Optional[TogglClient] = None
        self.workspace: Optional[Workspace] = None
        self.mute_window = MuteWindow()
        self.usage = UsageMeter()
        self.current_entry_id: Optional[int] = None
        self.current_description = ""
        self.progress: Optional[ProgressInfo] = None
        self._check_in_flight = False
        self._listeners: list[Callable[[SessionState], None]] = []

    # ------------------------------------------------------------------
    # Zustand veröffentlichen
    # ------------------------------------------------------------------
    def add_listener(self, callback: Callable[[SessionState], None]) -> None:
        self._listeners.append(callback)

    @property
    def state(self) -> SessionState:
        return SessionState(
            configured=self.client is not None and self.workspace is not None,
            workspace_name=self.workspace.name if self.workspace else None,
            current_entry_id=self.current_entry_id,
            current_description=self.current_description,
            muted_until=self.mute_window.end,
            progress=self.progress,
            api_calls=self.usage.count,
            near_limit=self.usage.near_limit,
        )

    def _notify(self) -> None:
        snapshot = self.state
        for callback in list(self._listeners):
            callback(snapshot)

    # ------------------------------------------------------------------
    # Konfiguration
    # ------------------------------------------------------------------
    async def configure(self, api_token: str, base_url: str = DEFAULT_BASE_URL) -> Optional[Workspace]:
        """Erzeugt den Client für ``api_token`` und übernimmt den ersten Workspace."""

        self.client = TogglClient(api_token, base_url=base_url, on_call=self._record_call)
        self.workspace = None
        try:
            workspaces = await self.client.fetch_workspaces()
        except RemoteError as exc:
            logger.warning("Could not fetch workspaces: %s", exc)
            self._notify()
            return None
        if workspaces:
            self.workspace = workspaces[0]
            logger.info("Using workspace %s (%s)", self.workspace.name, self.workspace.id)
        else:
            logger.warning("Account has no workspaces")
        self._notify()
        return self.workspace

    def set_mute_minutes(self, minutes: int) -> None:
        if minutes <= 0:
            raise ValueError("Mute duration must be positive")
        self.mute_minutes = minutes

    def logout(self) -> None:
        self.client = None
        self.workspace = None
        self.mute_window.clear()
        self.progress = None
        self.current_entry_id = None
        self.current_description = ""
        self.usage.reset()
        logger.info("Logged out")
        self._notify()

    def _record_call(self) -> None:
        self.usage.record_call()
        self._notify()

    def _require_configured(self) -> tuple[TogglClient, Workspace]:
        if self.client is None:
            raise ConfigurationError("No API token configured")
        if self.workspace is None:
            raise ConfigurationError("No workspace available")
        return self.client, self.workspace

    # ------------------------------------------------------------------
    # Prüfungen
    # ------------------------------------------------------------------
    async def perform_check(self, now: Optional[datetime] = None) -> None:
        now = now or self.clock()
        self.usage.maybe_rollover(now)

        if self.mute_window.is_active(now):
            logger.debug("Check skipped: muted until %s", self.mute_window.end)
            return
        try:
            client, workspace = self._require_configured()
        except ConfigurationError as exc:
            logger.debug("Check skipped: %s", exc)
            return
        if self._check_in_flight:
            logger.debug("Check skipped: previous check still running")
            return

        self._check_in_flight = True
        try:
            await self._check(client, workspace)
        finally:
            self._check_in_flight = False

    async def _check(self, client: TogglClient, workspace: Workspace) -> None:
        try:
            entry = await client.fetch_current_entry()
        except RemoteError as exc:
            logger.warning("Failed to check timer: %s", exc)
            return

        if entry is not None:
            logger.info("Current timer: %s", entry.description)
            self._set_current(entry)
            return

        logger.info("No timer running, prompting")
        self.current_entry_id = None
        self.current_description = ""
        self._notify()

        try:
            suggestions = suggestions_from(await client.fetch_recent_entries())
        except RemoteError as exc:
            logger.warning("Failed to get recent entries: %s", exc)
            suggestions = []

        result = await self.prompt.ask(PROMPT_TITLE, PROMPT_MESSAGE, suggestions)
        # Stummschaltung zählt ab der Antwort, nicht ab Beginn der Prüfung
        await self._apply(result, client, workspace, self.clock())

    async def _apply(self, result: PromptResult, client: TogglClient, workspace: Workspace,
                     now: datetime) -> None:
        if result.action is PromptAction.MUTE:
            self.mute_for(self.mute_minutes, now)
            return
        description = result.description.strip()
        if result.action is not PromptAction.START or not description:
            logger.debug("Prompt dismissed")
            return
        try:
            entry = await client.start_entry(description, workspace.id)
        except RemoteError as exc:
            logger.warning("Failed to start timer: %s", exc)
            return
        logger.info("Timer started: %s", entry.description)
        self._set_current(entry)

    def _set_current(self, entry: TimeEntry) -> None:
        self.current_entry_id = entry.id
        self.current_description = entry.description
        self._notify()

    # ------------------------------------------------------------------
    # Benutzeraktionen
    # ------------------------------------------------------------------
    def mute_for(self, minutes: int, now: Optional[datetime] = None) -> datetime:
        end = self.mute_window.mute(minutes, now or self.clock())
        logger.info("Muted for %s min", minutes)
        self._notify()
        return end

    async def start_entry(self, description: str) -> TimeEntry:
        client, workspace = self._require_configured()
        entry = await client.start_entry(description, workspace.id)
        self._set_current(entry)
        return entry

    async def change_task(self, description: str) -> None:
        """Stoppt den laufenden Eintrag und startet einen neuen mit ``description``.

        Klappt das Stoppen, aber nicht das Starten, läuft bis zur nächsten
        Prüfung nichts. Das wird als ``PartialFailure`` gemeldet.
        """

        if self.current_entry_id is None or self.client is None or self.workspace is None:
            logger.debug("Change task ignored: no running entry")
            return
        client, workspace = self.client, self.workspace
        await client.stop_entry(self.current_entry_id, workspace.id)
        try:
            await client.start_entry(description, workspace.id)
        except RemoteError as exc:
            raise PartialFailure(f"Stopped the running entry but could not start a new one: {exc}",
                                 response=exc.response) from exc
        self.current_description = description
        self.current_entry_id = None
        self._notify()

    async def rename_task(self, description: str) -> Optional[TimeEntry]:
        if self.current_entry_id is None or self.client is None or self.workspace is None:
            return None
        entry = await self.client.update_entry(self.current_entry_id, self.workspace.id, description)
        self._set_current(entry)
        return entry

    # ------------------------------------------------------------------
    # Fortschritt
    # ------------------------------------------------------------------
    def publish_progress(self, progress: Optional[ProgressInfo], now: Optional[datetime] = None) -> None:
        self.usage.maybe_rollover(now or self.clock())
        self.progress = progress
        self._notify()


__all__ = [
    "ReminderController",
    "ConfigurationError",
    "PartialFailure",
    "Prompt",
    "suggestions_from",
]
