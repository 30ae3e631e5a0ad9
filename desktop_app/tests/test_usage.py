from __future__ import annotations

from datetime import datetime, timedelta, timezone

from togglnag_desktop.usage import UsageMeter

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def test_first_rollover_starts_window_without_touching_count() -> None:
    meter = UsageMeter()
    meter.record_call()
    meter.record_call()

    assert meter.maybe_rollover(START) is False
    assert meter.window_start == START
    assert meter.count == 2


def test_count_is_kept_within_the_hour() -> None:
    meter = UsageMeter()
    meter.maybe_rollover(START)
    previous = 0
    for minute in range(0, 60, 5):
        meter.record_call()
        meter.maybe_rollover(START + timedelta(minutes=minute, seconds=59))
        assert meter.count >= previous
        previous = meter.count
    assert meter.count == 12
    assert meter.window_start == START


def test_count_resets_after_an_hour() -> None:
    meter = UsageMeter()
    meter.maybe_rollover(START)
    for _ in range(40):
        meter.record_call()

    later = START + timedelta(hours=1)
    assert meter.maybe_rollover(later) is True
    assert meter.count == 0
    assert meter.window_start == later


def test_near_limit_is_advisory() -> None:
    meter = UsageMeter()
    for _ in range(25):
        meter.record_call()
    assert not meter.near_limit
    meter.record_call()
    assert meter.near_limit
    meter.record_call()
    assert meter.count == 27


def test_reset_clears_window() -> None:
    meter = UsageMeter()
    meter.maybe_rollover(START)
    meter.record_call()
    meter.reset()
    assert meter.count == 0
    assert meter.window_start is None
