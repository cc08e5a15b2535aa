from __future__ import annotations

import logging
from typing import List, Protocol

from .authorization import AccessCallback
from .errors import CalendarNotFoundError
from .models import Calendar, Event
from .utils import split_calendar_spec
from .window import DateWindow


class CalendarStore(Protocol):
    def request_access(self, callback: AccessCallback) -> None:
        """Start an access prompt; ``callback(granted, error)`` fires exactly once."""

    def calendars(self) -> List[Calendar]: ...

    def events(self, calendar: Calendar, window: DateWindow) -> List[Event]: ...

    def create_event(self, calendar: Calendar, event: Event) -> Event: ...

    def delete_event(self, calendar: Calendar, event: Event) -> None: ...


def find_calendar(store: CalendarStore, name: str, side: str) -> Calendar:
    parts = split_calendar_spec(name)
    if parts is None:
        raise CalendarNotFoundError(side, name)
    account, title = parts
    for calendar in store.calendars():
        if calendar.account == account and calendar.title == title:
            logging.debug("Resolved %s calendar %s to %s", side, name, calendar.calendar_id)
            return calendar
    raise CalendarNotFoundError(side, name)
