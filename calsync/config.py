from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .errors import ConfigurationError
from .window import DEFAULT_WINDOW_DAYS

load_dotenv()

DEFAULT_AUTH_TIMEOUT = 300.0
LOCALTIME_PATH = Path("/etc/localtime")
TIMEZONE_FILE = Path("/etc/timezone")


@dataclass
class Settings:
    timezone: tzinfo
    google_client_secrets: str = "credentials.json"
    google_token_dir: str = "tokens"
    google_accounts: List[str] = field(default_factory=list)
    window_days: int = DEFAULT_WINDOW_DAYS
    auth_timeout: float = DEFAULT_AUTH_TIMEOUT

    def token_file(self, account: str) -> Path:
        return Path(self.google_token_dir) / f"{account}.json"


def _zone(name: str) -> Optional[ZoneInfo]:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def system_timezone() -> tzinfo:
    """The host's IANA zone, so that adding days keeps local midnight across DST."""
    candidates: List[str] = []
    tz_env = os.getenv("TZ")
    if tz_env:
        candidates.append(tz_env.lstrip(":"))
    if LOCALTIME_PATH.is_symlink():
        target = LOCALTIME_PATH.resolve().as_posix()
        if "zoneinfo/" in target:
            candidates.append(target.split("zoneinfo/", 1)[1])
    if TIMEZONE_FILE.is_file():
        candidates.append(TIMEZONE_FILE.read_text(encoding="utf-8").strip())

    for name in candidates:
        zone = _zone(name)
        if zone is not None:
            return zone

    if LOCALTIME_PATH.is_file():
        try:
            with LOCALTIME_PATH.open("rb") as fh:
                return ZoneInfo.from_file(fh, key="localtime")
        except ValueError as exc:
            logging.warning("Unreadable %s: %s", LOCALTIME_PATH, exc)
    logging.warning("Cannot determine the system timezone, using a fixed UTC offset")
    return datetime.now().astimezone().tzinfo


def get_timezone() -> tzinfo:
    tz_name = os.getenv("TIMEZONE")
    if not tz_name:
        return system_timezone()
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logging.warning("Invalid TIMEZONE %s, falling back to UTC", tz_name)
        return ZoneInfo("UTC")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def parse_accounts(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [name.strip() for name in raw.split(",") if name.strip()]


def get_settings() -> Settings:
    settings = Settings(
        timezone=get_timezone(),
        google_client_secrets=os.getenv("GOOGLE_CLIENT_SECRETS", "credentials.json"),
        google_token_dir=os.getenv("GOOGLE_TOKEN_DIR", "tokens"),
        google_accounts=parse_accounts(os.getenv("GOOGLE_ACCOUNTS")),
        window_days=_env_number("SYNC_WINDOW_DAYS", DEFAULT_WINDOW_DAYS, int),
        auth_timeout=_env_number("AUTH_TIMEOUT", DEFAULT_AUTH_TIMEOUT, float),
    )
    if not settings.google_accounts:
        logging.warning("GOOGLE_ACCOUNTS is not set")
    return settings
