from __future__ import annotations

from typing import Optional


class CalendarSyncError(Exception):
    pass


class FatalSyncError(CalendarSyncError):
    """Precondition failure that stops the run before any action is taken."""


class ArgumentError(FatalSyncError):
    pass


class ConfigurationError(FatalSyncError):
    pass


class CalendarNotFoundError(FatalSyncError):
    def __init__(self, side: str, name: str):
        self.side = side
        self.name = name
        super().__init__(f'{side.capitalize()} calendar "{name}" not found.')


class AuthorizationDeniedError(FatalSyncError):
    def __init__(self, cause: Optional[BaseException] = None, message: str = "Access to calendar was denied."):
        self.cause = cause
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class AuthorizationTimeoutError(AuthorizationDeniedError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(message=f"No authorization response within {timeout:g}s.")


class EventActionError(CalendarSyncError):
    verb = "process"

    def __init__(self, event, cause: BaseException):
        self.event = event
        self.cause = cause
        super().__init__(f"Failed to {self.verb} event: {cause}")


class EventCreationError(EventActionError):
    verb = "create"


class EventDeletionError(EventActionError):
    verb = "delete"


class CalendarReadError(FatalSyncError):
    def __init__(self, what: str, cause: BaseException):
        self.what = what
        self.cause = cause
        super().__init__(f"Failed to read {what}: {cause}")
