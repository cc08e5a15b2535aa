from __future__ import annotations

import logging
import math
import threading
from datetime import date, datetime, time, tzinfo
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .authorization import AccessCallback
from .config import Settings
from .errors import ConfigurationError
from .models import Calendar, Event
from .window import DateWindow

SCOPES = ["https://www.googleapis.com/auth/calendar"]


def _load_credentials(client_secrets_file: str, token_file: Path, timeout: Optional[float] = None) -> Credentials:
    creds = None
    if token_file.exists():
        try:
            creds = Credentials.from_authorized_user_file(str(token_file), SCOPES)
        except ValueError as exc:
            logging.warning("Ignoring unreadable token file %s: %s", token_file, exc)
            creds = None
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not Path(client_secrets_file).exists():
                raise ConfigurationError(f"OAuth client secrets file {client_secrets_file} not found")
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets_file, SCOPES)
            timeout_seconds = max(1, math.ceil(timeout)) if timeout else None
            creds = flow.run_local_server(port=0, timeout_seconds=timeout_seconds)
        token_file.parent.mkdir(parents=True, exist_ok=True)
        token_file.write_text(creds.to_json())
    return creds


def build_service(client_secrets_file: str, token_file: Path, timeout: Optional[float] = None):
    creds = _load_credentials(client_secrets_file, token_file, timeout)
    return build("calendar", "v3", credentials=creds)


def _parse_when(when: Optional[dict], tz: tzinfo) -> tuple[Optional[datetime], bool]:
    if not when:
        return None, False
    if when.get("dateTime"):
        return datetime.fromisoformat(when["dateTime"]), False
    if when.get("date"):
        day = date.fromisoformat(when["date"])
        return datetime.combine(day, time.min, tzinfo=tz), True
    return None, False


def event_from_gcal(item: dict, tz: tzinfo) -> Event:
    start, all_day = _parse_when(item.get("start"), tz)
    end, _ = _parse_when(item.get("end"), tz)
    return Event(
        title=item.get("summary"),
        start=start,
        end=end,
        notes=item.get("description"),
        event_id=item.get("id"),
        all_day=all_day,
    )


def _format_when(value: datetime, all_day: bool, tz: tzinfo) -> dict:
    if all_day:
        return {"date": value.date().isoformat()}
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return {"dateTime": value.isoformat()}


def event_to_gcal_body(event: Event, tz: tzinfo) -> dict:
    if event.start is None or event.end is None:
        raise ValueError("Google Calendar events need both a start and an end")
    body = {
        "start": _format_when(event.start, event.all_day, tz),
        "end": _format_when(event.end, event.all_day, tz),
    }
    if event.title is not None:
        body["summary"] = event.title
    if event.notes:
        body["description"] = event.notes
    return body


def _paginate(request_for_page: Callable[[Optional[str]], dict]) -> Iterator[dict]:
    page_token = None
    while True:
        result = request_for_page(page_token)
        yield from result.get("items", [])
        page_token = result.get("nextPageToken")
        if not page_token:
            break


class GoogleCalendarStore:
    """Calendars of one or more Google accounts, one OAuth token per account."""

    def __init__(self, settings: Settings, service_factory: Callable = build_service):
        self.settings = settings
        self._service_factory = service_factory
        self._services: Dict[str, object] = {}

    def authorize(self) -> None:
        if not self.settings.google_accounts:
            raise ConfigurationError("GOOGLE_ACCOUNTS is empty; no account to read calendars from")
        for account in self.settings.google_accounts:
            logging.info("Authorizing Google account %s", account)
            self._services[account] = self._service_factory(
                self.settings.google_client_secrets,
                self.settings.token_file(account),
                self.settings.auth_timeout,
            )

    def request_access(self, callback: AccessCallback) -> None:
        def worker() -> None:
            try:
                self.authorize()
            except Exception as exc:
                logging.debug("Authorization failed", exc_info=True)
                callback(False, exc)
                return
            callback(True, None)

        threading.Thread(target=worker, name="calsync-authorize", daemon=True).start()

    def _service(self, account: str):
        try:
            return self._services[account]
        except KeyError:
            raise RuntimeError(f"Account {account} has not been authorized") from None

    def calendars(self) -> List[Calendar]:
        calendars: List[Calendar] = []
        for account, service in self._services.items():
            items = _paginate(
                lambda token, service=service: service.calendarList().list(pageToken=token).execute()
            )
            for item in items:
                title = item.get("summaryOverride") or item.get("summary", "")
                calendars.append(Calendar(account=account, title=title, calendar_id=item["id"]))
        logging.info("Found %d calendars across %d accounts", len(calendars), len(self._services))
        return calendars

    def events(self, calendar: Calendar, window: DateWindow) -> List[Event]:
        service = self._service(calendar.account)
        logging.info("Fetching events of %s from %s to %s", calendar.title, window.start, window.end)
        items = _paginate(
            lambda token: service.events()
            .list(
                calendarId=calendar.calendar_id,
                timeMin=window.start.isoformat(),
                timeMax=window.end.isoformat(),
                singleEvents=True,
                showDeleted=False,
                maxResults=2500,
                pageToken=token,
            )
            .execute()
        )
        events = [event_from_gcal(item, self.settings.timezone) for item in items if item.get("status") != "cancelled"]
        return window.select(events)

    def create_event(self, calendar: Calendar, event: Event) -> Event:
        service = self._service(calendar.account)
        body = event_to_gcal_body(event, self.settings.timezone)
        created = service.events().insert(calendarId=calendar.calendar_id, body=body).execute()
        return event_from_gcal(created, self.settings.timezone)

    def delete_event(self, calendar: Calendar, event: Event) -> None:
        if not event.event_id:
            raise ValueError("Cannot delete an event without an id")
        service = self._service(calendar.account)
        service.events().delete(calendarId=calendar.calendar_id, eventId=event.event_id).execute()
