from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional, TextIO

from .models import Event
from .utils import display_fields

ACTIONS_LOGGER = "calsync.actions"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
ACTION_FORMAT = "-----[%(asctime)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(
    level: int = logging.INFO,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """Diagnostics and errors go to stderr, action blocks to stdout."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=stderr or sys.stderr,
        force=True,
    )
    actions = logging.getLogger(ACTIONS_LOGGER)
    for handler in list(actions.handlers):
        actions.removeHandler(handler)
    handler = logging.StreamHandler(stdout or sys.stdout)
    handler.setFormatter(logging.Formatter(ACTION_FORMAT, datefmt=DATE_FORMAT))
    actions.addHandler(handler)
    actions.setLevel(logging.INFO)
    actions.propagate = False


@dataclass
class Reporter:
    actions: logging.Logger = field(default_factory=lambda: logging.getLogger(ACTIONS_LOGGER))
    errors: logging.Logger = field(default_factory=lambda: logging.getLogger("calsync"))

    def action(self, verb: str, event: Event) -> None:
        title, start, end = display_fields(event)
        self.actions.info("%s-----\nTitle: %s\nStart: %s\nEnd: %s", verb, title, start, end)

    def failure(self, error: BaseException) -> None:
        self.errors.error("%s", error)

    def info(self, message: str, *args) -> None:
        self.errors.info(message, *args)
