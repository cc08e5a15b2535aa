from __future__ import annotations

import pathlib
import sys
from dataclasses import replace
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from calsync.models import SYNC_MARKER, Calendar, Event  # noqa: E402
from calsync.window import DateWindow  # noqa: E402

TZ = ZoneInfo("Europe/Berlin")
WINDOW_START = datetime(2026, 3, 2, tzinfo=TZ)


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return WINDOW_START + timedelta(days=day, hours=hour, minutes=minute)


def make_event(title, day=0, hour=9, duration=1, notes=None, event_id=None) -> Event:
    start = at(day, hour)
    return Event(title=title, start=start, end=start + timedelta(hours=duration), notes=notes, event_id=event_id)


def synced(event: Event, event_id=None) -> Event:
    return replace(event, notes=SYNC_MARKER, event_id=event_id)


class FakeStore:
    """In-memory calendar store keyed by calendar id."""

    def __init__(self, calendars, events=None, grant=True, respond=True, fail_titles=()):
        self._calendars = list(calendars)
        self.data = {cal.calendar_id: list((events or {}).get(cal.calendar_id, [])) for cal in self._calendars}
        self.grant = grant
        self.respond = respond
        self.fail_titles = set(fail_titles)
        self.access_requests = 0
        self.reads = []
        self.created = []
        self.deleted = []
        self._next_id = 0

    def request_access(self, callback):
        self.access_requests += 1
        if self.respond:
            callback(self.grant, None if self.grant else RuntimeError("user declined"))

    def calendars(self):
        return list(self._calendars)

    def events(self, calendar, window):
        self.reads.append((calendar.calendar_id, window))
        return window.select(self.data[calendar.calendar_id])

    def create_event(self, calendar, event):
        if event.title in self.fail_titles:
            raise RuntimeError(f"cannot save {event.title}")
        self._next_id += 1
        stored = replace(event, event_id=f"{calendar.calendar_id}-{self._next_id}")
        self.data[calendar.calendar_id].append(stored)
        self.created.append(stored)
        return stored

    def delete_event(self, calendar, event):
        if event.title in self.fail_titles:
            raise RuntimeError(f"cannot remove {event.title}")
        self.data[calendar.calendar_id] = [
            e for e in self.data[calendar.calendar_id] if e.event_id != event.event_id
        ]
        self.deleted.append(event)


SOURCE = Calendar(account="work", title="Meetings", calendar_id="src")
TARGET = Calendar(account="personal", title="Mirror", calendar_id="dst")


@pytest.fixture
def window() -> DateWindow:
    return DateWindow(start=WINDOW_START, end=WINDOW_START + timedelta(days=30))


@pytest.fixture
def make_store():
    def _make(source_events=(), target_events=(), **kwargs) -> FakeStore:
        return FakeStore(
            [SOURCE, TARGET],
            {"src": list(source_events), "dst": list(target_events)},
            **kwargs,
        )

    return _make
