from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calsync.models import Event
from calsync.window import DateWindow, compute_window

from conftest import TZ, WINDOW_START


def test_compute_window_starts_at_local_midnight():
    now = datetime(2026, 3, 2, 15, 42, 7, tzinfo=TZ)
    window = compute_window(now=now, tz=TZ)
    assert window.start == datetime(2026, 3, 2, tzinfo=TZ)
    assert window.end == datetime(2026, 4, 1, tzinfo=TZ)


def test_compute_window_converts_now_into_zone():
    now = datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc)
    window = compute_window(now=now, tz=TZ)
    assert window.start == datetime(2026, 3, 3, tzinfo=TZ)


def test_compute_window_custom_length():
    now = datetime(2026, 3, 2, 8, tzinfo=TZ)
    assert compute_window(now=now, tz=TZ, days=7).end == datetime(2026, 3, 9, tzinfo=TZ)


def test_compute_window_keeps_midnight_across_dst():
    now = datetime(2026, 3, 20, 12, tzinfo=ZoneInfo("Europe/Berlin"))
    window = compute_window(now=now, tz=ZoneInfo("Europe/Berlin"))
    assert window.end.hour == 0
    assert window.end.date().isoformat() == "2026-04-19"


def test_compute_window_without_arguments_is_today():
    window = compute_window()
    assert window.start <= datetime.now().astimezone() < window.end
    assert window.end - window.start == timedelta(days=30)


@pytest.mark.parametrize("days", [0, -3])
def test_compute_window_rejects_non_positive_length(days):
    with pytest.raises(ValueError):
        compute_window(days=days)


def test_window_is_half_open(window):
    assert window.contains(WINDOW_START)
    assert not window.contains(window.end)
    assert window.contains(window.end - timedelta(microseconds=1))


def test_event_at_window_start_is_selected(window):
    event = Event("first", WINDOW_START, WINDOW_START + timedelta(hours=1))
    assert window.overlaps(event)


def test_event_at_window_end_is_not_selected(window):
    event = Event("late", window.end, window.end + timedelta(hours=1))
    assert not window.overlaps(event)


def test_event_running_into_window_is_selected(window):
    event = Event("overnight", WINDOW_START - timedelta(hours=2), WINDOW_START + timedelta(hours=1))
    assert window.overlaps(event)


def test_event_ending_at_window_start_is_not_selected(window):
    event = Event("yesterday", WINDOW_START - timedelta(hours=2), WINDOW_START)
    assert not window.overlaps(event)


def test_events_without_start_are_not_selected(window):
    assert not window.overlaps(Event("floating"))
    assert window.overlaps(Event("open ended", start=WINDOW_START))


def test_select_keeps_order(window):
    inside = [Event(str(i), WINDOW_START + timedelta(days=i)) for i in (3, 1, 2)]
    outside = Event("out", window.end + timedelta(days=1))
    assert window.select([inside[0], outside, inside[1], inside[2]]) == inside


def test_window_is_comparable_across_zones():
    window = DateWindow(datetime(2026, 3, 2, tzinfo=TZ), datetime(2026, 3, 3, tzinfo=TZ))
    assert window.contains(datetime(2026, 3, 1, 23, 0, tzinfo=timezone.utc))
