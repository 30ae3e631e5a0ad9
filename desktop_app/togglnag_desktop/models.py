"""Datenmodelle für die Desktop-Erinnerung."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

RUNNING_DURATION = -1


@dataclass(slots=True, frozen=True)
class TimeEntry:
    """Erfasster Zeiteintrag, wie ihn die Toggl API liefert."""

    id: int
    workspace_id: int
    start: str
    duration: int
    description: str = ""
    project_id: Optional[int] = None
    billable: bool = False
    at: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.duration < 0

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "TimeEntry":
        workspace_id = data.get("wid", data.get("workspace_id"))
        if workspace_id is None:
            raise KeyError("wid")
        project_id = data.get("pid", data.get("project_id"))
        return cls(
            id=int(data["id"]),
            workspace_id=int(workspace_id),
            project_id=int(project_id) if project_id is not None else None,
            billable=bool(data.get("billable", False)),
            start=str(data["start"]),
            duration=int(data["duration"]),
            description=data.get("description") or "",
            at=data.get("at"),
        )


@dataclass(slots=True, frozen=True)
class Workspace:
    """Workspace, unter dem Einträge angelegt werden."""

    id: int
    name: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Workspace":
        return cls(id=int(data["id"]), name=str(data.get("name", "")))


@dataclass(slots=True, frozen=True)
class ProgressInfo:
    """Anteil bis zur nächsten Prüfung (oder bis Ende der Stummschaltung) plus Text."""

    value: float
    label: str


class PromptAction(str, Enum):
    START = "start"
    MUTE = "mute"
    DISMISS = "dismiss"


@dataclass(slots=True, frozen=True)
class PromptResult:
    """Antwort des Erinnerungsdialogs."""

    action: PromptAction
    description: str = ""

    @classmethod
    def start(cls, description: str) -> "PromptResult":
        return cls(PromptAction.START, description)

    @classmethod
    def mute(cls) -> "PromptResult":
        return cls(PromptAction.MUTE)

    @classmethod
    def dismiss(cls) -> "PromptResult":
        return cls(PromptAction.DISMISS)


@dataclass(slots=True, frozen=True)
class SessionState:
    """Momentaufnahme des Controller-Zustands für die Oberfläche."""

    configured: bool = False
    workspace_name: Optional[str] = None
    current_entry_id: Optional[int] = None
    current_description: str = ""
    muted_until: Optional[datetime] = None
    progress: Optional[ProgressInfo] = None
    api_calls: int = 0
    near_limit: bool = False

    @property
    def is_muted(self) -> bool:
        return self.muted_until is not None


__all__ = [
    "RUNNING_DURATION",
    "TimeEntry",
    "Workspace",
    "ProgressInfo",
    "PromptAction",
    "PromptResult",
    "SessionState",
]
