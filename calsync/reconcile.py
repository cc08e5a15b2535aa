"""Decide what a one-way sync has to do.

Source events whose key is missing from the target get created there. Target
events carrying the sync marker whose key vanished from the source get deleted.
Events a user added to the target by hand never carry the marker, so they are
never deleted, and they still satisfy a source event with the same key.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .models import Event
from .utils import event_key


@dataclass(frozen=True)
class SyncPlan:
    creations: Tuple[Event, ...] = ()
    deletions: Tuple[Event, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.creations and not self.deletions


def reconcile(source_events: Sequence[Event], target_events: Sequence[Event]) -> SyncPlan:
    target_keys = {event_key(event) for event in target_events}
    creations = []
    planned: set[str] = set()
    for event in source_events:
        key = event_key(event)
        if key in target_keys or key in planned:
            continue
        planned.add(key)
        creations.append(event)

    source_keys = {event_key(event) for event in source_events}
    deletions = [
        event for event in target_events if event.is_synced and event_key(event) not in source_keys
    ]
    return SyncPlan(creations=tuple(creations), deletions=tuple(deletions))
