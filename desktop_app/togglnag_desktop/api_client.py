"""HTTP-Client für die Toggl Track API."""

from __future__ import annotations

import asyncio
import base64
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from urllib.parse import urljoin

import requests

from .models import RUNNING_DURATION, TimeEntry, Workspace

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.track.toggl.com/api/v9"
CREATED_WITH = "togglnag"


class RemoteError(RuntimeError):
    """Fehler beim Zugriff auf die Toggl API."""

    def __init__(self, message: str, *, response: Optional[requests.Response] = None) -> None:
        super().__init__(message)
        self.response = response


class TogglClient:
    """Kapselt die HTTP-Aufrufe zur Toggl API.

    Jede öffentliche Coroutine sendet genau eine Anfrage. ``on_call`` wird
    vor dem Absenden aufgerufen, fehlgeschlagene Aufrufe zählen also mit.
    """

    def __init__(self, api_token: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 15,
                 on_call: Optional[Callable[[], None]] = None) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.api_token = api_token
        self.timeout = timeout
        self.on_call = on_call

    # ------------------------------------------------------------------
    # Hilfsfunktionen
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        credentials = f"{self.api_token}:api_token".encode("utf-8")
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": "Basic " + base64.b64encode(credentials).decode("ascii"),
        }

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update(self._headers())
        logger.debug("%s %s", method, url)
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise RemoteError(str(exc)) from exc

        if response.status_code >= 400:
            raise RemoteError(f"API error {response.status_code}: {response.text}", response=response)

        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"Invalid JSON from {url}", response=response) from exc

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        if self.on_call is not None:
            self.on_call()
        return await asyncio.to_thread(self._request, method, path, **kwargs)

    @staticmethod
    def _parse_entry(data: Any) -> TimeEntry:
        if not isinstance(data, dict):
            raise RemoteError(f"Unexpected time entry payload: {data!r}")
        try:
            return TimeEntry.from_payload(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteError(f"Malformed time entry: {exc}") from exc

    @staticmethod
    def _parse_list(data: Any) -> list:
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteError(f"Expected a list, got {type(data).__name__}")
        return data

    @staticmethod
    def format_timestamp(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    # ------------------------------------------------------------------
    # Lesen
    # ------------------------------------------------------------------
    async def fetch_current_entry(self) -> Optional[TimeEntry]:
        data = await self._call("GET", "me/time_entries/current")
        if data is None:
            return None
        return self._parse_entry(data)

    async def fetch_workspaces(self) -> list[Workspace]:
        data = await self._call("GET", "workspaces")
        try:
            return [Workspace.from_payload(item) for item in self._parse_list(data)]
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteError(f"Malformed workspace: {exc}") from exc

    async def fetch_recent_entries(self) -> list[TimeEntry]:
        data = await self._call("GET", "me/time_entries")
        return [self._parse_entry(item) for item in self._parse_list(data)]

    # ------------------------------------------------------------------
    # Schreiben
    # ------------------------------------------------------------------
    async def start_entry(self, description: str, workspace_id: int, *,
                          start: Optional[datetime] = None) -> TimeEntry:
        payload = {
            "description": description,
            "created_with": CREATED_WITH,
            "workspace_id": workspace_id,
            "duration": RUNNING_DURATION,
            "start": self.format_timestamp(start or datetime.now(timezone.utc)),
            "stop": None,
        }
        data = await self._call("POST", f"workspaces/{workspace_id}/time_entries", json=payload)
        return self._parse_entry(data)

    async def stop_entry(self, entry_id: int, workspace_id: int) -> TimeEntry:
        data = await self._call("PATCH", f"workspaces/{workspace_id}/time_entries/{entry_id}/stop")
        return self._parse_entry(data)

    async def update_entry(self, entry_id: int, workspace_id: int, description: str) -> TimeEntry:
        payload = {"description": description}
        data = await self._call("PUT", f"workspaces/{workspace_id}/time_entries/{entry_id}", json=payload)
        return self._parse_entry(data)


__all__ = ["TogglClient", "RemoteError", "DEFAULT_BASE_URL"]
