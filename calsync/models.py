from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

SYNC_MARKER = "[synced]"


@dataclass(frozen=True)
class Calendar:
    account: str
    title: str
    calendar_id: str


@dataclass(frozen=True)
class Event:
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    notes: Optional[str] = None
    event_id: Optional[str] = field(default=None, compare=False)
    all_day: bool = field(default=False, compare=False)

    @property
    def is_synced(self) -> bool:
        return self.notes is not None and SYNC_MARKER in self.notes

    def synced_copy(self) -> "Event":
        """Copy to write into a target calendar: same slot, marker as notes, no id."""
        return replace(self, notes=SYNC_MARKER, event_id=None)
