from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from .models import Event

UNTITLED = "Untitled"
NO_START = "No start date"
NO_END = "No end date"

KEY_SEPARATOR = "\x1f"
CALENDAR_SEPARATOR = "→"


def format_timestamp(value: Optional[datetime], missing: str) -> str:
    if value is None:
        return missing
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%d %H:%M:%S %z")
    return value.strftime("%Y-%m-%d %H:%M:%S")


def display_fields(event: Event) -> tuple[str, str, str]:
    """Title, start and end of an event with the missing-value sentinels applied."""
    return (
        event.title if event.title is not None else UNTITLED,
        format_timestamp(event.start, NO_START),
        format_timestamp(event.end, NO_END),
    )


def event_key(event: Event) -> str:
    return KEY_SEPARATOR.join(display_fields(event))


def split_calendar_spec(spec: str) -> Optional[tuple[str, str]]:
    parts = [part for part in spec.split(CALENDAR_SEPARATOR) if part]
    if len(parts) != 2:
        return None
    return parts[0], parts[1]
