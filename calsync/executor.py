from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .errors import EventActionError, EventCreationError, EventDeletionError
from .models import Calendar, Event
from .reconcile import SyncPlan
from .reporting import Reporter

CREATE = "create"
DELETE = "delete"


@dataclass(frozen=True)
class ActionResult:
    action: str
    event: Event
    dry_run: bool = False
    error: Optional[EventActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def execute_plan(
    store,
    target: Calendar,
    plan: SyncPlan,
    reporter: Reporter,
    dry_run: bool = False,
) -> List[ActionResult]:
    """Apply creations then deletions one by one; a failed item never stops the rest."""
    results: List[ActionResult] = []

    for event in plan.creations:
        if dry_run:
            reporter.action("Would create event", event)
            results.append(ActionResult(CREATE, event, dry_run=True))
            continue
        try:
            created = store.create_event(target, event.synced_copy())
        except Exception as exc:
            error = EventCreationError(event, exc)
            reporter.failure(error)
            results.append(ActionResult(CREATE, event, error=error))
            continue
        reporter.action("Created event", created)
        results.append(ActionResult(CREATE, created))

    for event in plan.deletions:
        if dry_run:
            reporter.action("Would delete event", event)
            results.append(ActionResult(DELETE, event, dry_run=True))
            continue
        try:
            store.delete_event(target, event)
        except Exception as exc:
            error = EventDeletionError(event, exc)
            reporter.failure(error)
            results.append(ActionResult(DELETE, event, error=error))
            continue
        reporter.action("Deleted event", event)
        results.append(ActionResult(DELETE, event))

    return results
