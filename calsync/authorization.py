from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .errors import AuthorizationDeniedError, AuthorizationTimeoutError

AccessCallback = Callable[[bool, Optional[BaseException]], None]


class AccessRequest:
    """Single-fire completion for an asynchronous access prompt.

    The first call to :meth:`resolve` wins; later calls are ignored.
    """

    def __init__(self) -> None:
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._granted = False
        self._error: Optional[BaseException] = None

    @property
    def resolved(self) -> bool:
        return self._done.is_set()

    def resolve(self, granted: bool, error: Optional[BaseException] = None) -> bool:
        with self._lock:
            if self._done.is_set():
                logging.debug("Ignoring repeated authorization response (granted=%s)", granted)
                return False
            self._granted = granted
            self._error = error
            self._done.set()
        return True

    def wait(self, timeout: Optional[float]) -> None:
        if not self._done.wait(timeout):
            raise AuthorizationTimeoutError(timeout)
        if not self._granted:
            raise AuthorizationDeniedError(self._error)


def request_access(store, timeout: Optional[float]) -> None:
    """Ask ``store`` for access and block until it answers or ``timeout`` passes."""
    request = AccessRequest()
    logging.info("Requesting calendar access")
    store.request_access(request.resolve)
    request.wait(timeout)
    logging.info("Calendar access granted")
