from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock

import pytest

from togglnag_desktop.api_client import TogglClient
from togglnag_desktop.config import (ENV_API_BASE_URL, ENV_API_TOKEN,
                                     ENV_CHECK_INTERVAL, ENV_CONFIG_DIR,
                                     ENV_MUTE_DURATION)
from togglnag_desktop.controller import ReminderController
from togglnag_desktop.models import PromptResult, TimeEntry, Workspace


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: Optional[bytes] = None) -> None:
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        else:
            self.content = json.dumps(body).encode("utf-8")
        self.text = self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def make_entry() -> Callable[..., TimeEntry]:
    def factory(entry_id: int = 1, description: str = "", workspace_id: int = 7,
                duration: int = -1) -> TimeEntry:
        return TimeEntry(
            id=entry_id,
            workspace_id=workspace_id,
            start="2024-01-01T08:00:00Z",
            duration=duration,
            description=description,
            at="2024-01-01T08:00:00Z",
        )

    return factory


@pytest.fixture()
def prompt() -> AsyncMock:
    prompt = AsyncMock()
    prompt.ask.return_value = PromptResult.dismiss()
    return prompt


@pytest.fixture()
def client() -> AsyncMock:
    client = AsyncMock(spec=TogglClient)
    client.fetch_current_entry.return_value = None
    client.fetch_recent_entries.return_value = []
    return client


@pytest.fixture()
def controller(prompt: AsyncMock, client: AsyncMock, clock: FakeClock) -> ReminderController:
    controller = ReminderController(prompt, mute_minutes=120, clock=clock)
    controller.client = client
    controller.workspace = Workspace(id=7, name="Main")
    return controller


@pytest.fixture()
def requests_stub(monkeypatch):
    """Replace ``requests.request`` with a queue of canned responses."""

    calls: list[dict[str, Any]] = []
    responses: list[Any] = []

    def fake_request(method: str, url: str, **kwargs: Any):
        calls.append({"method": method, "url": url, **kwargs})
        result = responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr("togglnag_desktop.api_client.requests.request", fake_request)
    return calls, responses


@pytest.fixture()
def clean_env(monkeypatch, tmp_path):
    for key in (ENV_API_TOKEN, ENV_CHECK_INTERVAL, ENV_MUTE_DURATION, ENV_API_BASE_URL):
        # setenv first so monkeypatch restores the variable even if load_dotenv sets it later
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.setenv(ENV_CONFIG_DIR, str(tmp_path))
    return tmp_path


@pytest.fixture()
def fake_response():
    return FakeResponse
