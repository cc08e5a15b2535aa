from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional

from .models import Event

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True)
class DateWindow:
    """Half-open interval ``[start, end)`` shared by both snapshots of a run."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def overlaps(self, event: Event) -> bool:
        if event.start is None:
            return False
        if event.end is None or event.end <= event.start:
            return self.contains(event.start)
        return event.start < self.end and event.end > self.start

    def select(self, events: Iterable[Event]) -> List[Event]:
        return [event for event in events if self.overlaps(event)]


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def compute_window(
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> DateWindow:
    if days <= 0:
        raise ValueError(f"Window length must be positive, got {days}")
    if now is None:
        now = datetime.now(tz) if tz else datetime.now().astimezone()
    elif tz is not None:
        now = now.astimezone(tz)
    start = start_of_day(now)
    return DateWindow(start=start, end=start + timedelta(days=days))
