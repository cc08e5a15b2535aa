from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .authorization import request_access
from .errors import CalendarReadError, FatalSyncError
from .executor import CREATE, DELETE, ActionResult, execute_plan
from .reconcile import SyncPlan, reconcile
from .reporting import Reporter
from .store import CalendarStore, find_calendar
from .window import DateWindow


@dataclass
class SyncReport:
    window: DateWindow
    plan: SyncPlan
    results: List[ActionResult] = field(default_factory=list)
    dry_run: bool = False

    def _count(self, action: str) -> int:
        return sum(1 for r in self.results if r.action == action and r.ok and not r.dry_run)

    @property
    def created(self) -> int:
        return self._count(CREATE)

    @property
    def deleted(self) -> int:
        return self._count(DELETE)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


def _read(what: str, call: Callable, *args):
    """Run a store read; anything but a fatal sync error becomes a ``CalendarReadError``."""
    try:
        return call(*args)
    except FatalSyncError:
        raise
    except Exception as exc:
        raise CalendarReadError(what, exc) from exc


def sync_calendars(
    store: CalendarStore,
    source: str,
    target: str,
    window: DateWindow,
    reporter: Optional[Reporter] = None,
    dry_run: bool = False,
    auth_timeout: Optional[float] = None,
) -> SyncReport:
    reporter = reporter or Reporter()
    request_access(store, auth_timeout)

    source_calendar = _read("source calendar", find_calendar, store, source, "source")
    target_calendar = _read("target calendar", find_calendar, store, target, "target")

    logging.info("Reading events from %s to %s", window.start.isoformat(), window.end.isoformat())
    source_events = _read(f'events of "{source}"', store.events, source_calendar, window)
    target_events = _read(f'events of "{target}"', store.events, target_calendar, window)
    logging.info("Found %d source and %d target events", len(source_events), len(target_events))

    plan = reconcile(source_events, target_events)
    results = execute_plan(store, target_calendar, plan, reporter, dry_run=dry_run)
    report = SyncReport(window=window, plan=plan, results=results, dry_run=dry_run)

    if dry_run:
        reporter.info(
            "Dry run complete. %d to create, %d to delete", len(plan.creations), len(plan.deletions)
        )
    else:
        reporter.info(
            "Sync complete. %d created, %d deleted, %d failed", report.created, report.deleted, report.failed
        )
    return report
