from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from togglnag_desktop.mute import MuteWindow

NOW = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("minutes", [1, 30, 120])
def test_mute_is_active_with_full_remaining(minutes: int) -> None:
    window = MuteWindow()
    end = window.mute(minutes, NOW)

    assert end == NOW + timedelta(minutes=minutes)
    assert window.is_active(NOW)
    assert window.remaining(NOW) == timedelta(minutes=minutes)


def test_mute_expires_lazily() -> None:
    window = MuteWindow()
    window.mute(30, NOW)
    after = NOW + timedelta(minutes=30, seconds=1)

    assert window.is_active(after) is False
    assert window.end is None
    assert window.remaining(after) is None


def test_mute_ends_exactly_at_end_time() -> None:
    window = MuteWindow()
    window.mute(30, NOW)
    assert window.is_active(NOW + timedelta(minutes=30)) is False


def test_remute_overwrites_window() -> None:
    window = MuteWindow()
    window.mute(120, NOW)
    later = NOW + timedelta(minutes=10)
    window.mute(30, later)

    assert window.remaining(later) == timedelta(minutes=30)
    assert window.total == timedelta(minutes=30)


def test_non_positive_duration_is_rejected() -> None:
    with pytest.raises(ValueError):
        MuteWindow().mute(0, NOW)


def test_inactive_window_has_no_remaining() -> None:
    window = MuteWindow()
    assert window.is_active(NOW) is False
    assert window.remaining(NOW) is None
