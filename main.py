from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional, Sequence

from calsync.config import Settings, get_settings
from calsync.errors import ArgumentError, FatalSyncError
from calsync.gcal import GoogleCalendarStore
from calsync.reporting import Reporter, configure_logging
from calsync.sync import sync_calendars
from calsync.window import compute_window

USAGE = 'calsync "source_account→source_calendar" "target_account→target_calendar" [--dry-run]'


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise ArgumentError(f"{message}. Usage: {USAGE}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = _ArgumentParser(description="Mirror one calendar into another", usage=USAGE)
    parser.add_argument("source", help='Source calendar as "account→calendar"')
    parser.add_argument("target", help='Target calendar as "account→calendar"')
    parser.add_argument("--dry-run", action="store_true", help="Show actions without modifying calendar")
    parser.add_argument("--days", type=int, default=None, help="Number of days to sync, starting today")
    parser.add_argument("--auth-timeout", type=float, default=None, help="Seconds to wait for authorization")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    return parser.parse_args(argv)


def main(
    argv: Optional[Sequence[str]] = None,
    store_factory: Callable[[Settings], object] = GoogleCalendarStore,
) -> int:
    configure_logging()
    try:
        args = parse_args(argv)
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        settings = get_settings()
        days = args.days if args.days is not None else settings.window_days
        if days <= 0:
            raise ArgumentError(f"--days must be positive, got {days}")
        if args.auth_timeout is not None:
            settings.auth_timeout = args.auth_timeout

        window = compute_window(tz=settings.timezone, days=days)
        sync_calendars(
            store=store_factory(settings),
            source=args.source,
            target=args.target,
            window=window,
            reporter=Reporter(),
            dry_run=args.dry_run,
            auth_timeout=settings.auth_timeout,
        )
    except FatalSyncError as exc:
        logging.error("%s", exc)
        return 1

    logging.info("Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
