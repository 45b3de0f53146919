"""
Configuration.

Values come from environment variables (a .env file in the working directory
is loaded first). Everything has a sensible default, so zutplan works without
any configuration at all.

    ZUTPLAN_TIMEZONE             local zone for plan timestamps (Europe/Warsaw)
    ZUTPLAN_CACHE_DIR            where cached results are written
    ZUTPLAN_REQUEST_TIMEOUT      seconds per upstream request (20)
    ZUTPLAN_PLAN_URL             student plan endpoint
    ZUTPLAN_SUGGEST_URL          search suggestion endpoint
    ZUTPLAN_PLAN_TTL_MINUTES     freshness of cached plans (30)
    ZUTPLAN_PERIODS_TTL_HOURS    freshness of academic calendar periods (6)
    ZUTPLAN_DAY_FETCHES_WEEK     day view fetches its whole week (true)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from zutplan.exceptions import ConfigurationError

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_TIMEZONE = "Europe/Warsaw"
DEFAULT_PLAN_URL = "https://plan.zut.edu.pl/schedule_student.php"
DEFAULT_SUGGEST_URL = "https://plan.zut.edu.pl/schedule.php"
DEFAULT_CALENDAR_PAGE = "https://www.zut.edu.pl/zut-studenci/organizacja-roku-akademickiego"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _default_cache_dir() -> Path:
    return PACKAGE_DIR / "data" / "cache"


def _calendar_urls(year: int) -> list[str]:
    """
    Candidate pages of the academic calendar, tried in order.
    """
    return [
        f"{DEFAULT_CALENDAR_PAGE}.html",
        f"{DEFAULT_CALENDAR_PAGE}-{year}{year + 1}.html",
        f"{DEFAULT_CALENDAR_PAGE}-{year - 1}{year}.html",
        f"{DEFAULT_CALENDAR_PAGE}-{year + 1}{year + 2}.html",
    ]


@dataclass
class Settings:
    timezone: str = DEFAULT_TIMEZONE
    cache_dir: Path = field(default_factory=_default_cache_dir)
    request_timeout: float = 20.0
    plan_url: str = DEFAULT_PLAN_URL
    suggest_url: str = DEFAULT_SUGGEST_URL
    calendar_urls: list[str] = field(default_factory=lambda: _calendar_urls(date.today().year))
    plan_ttl_minutes: int = 30
    periods_ttl_hours: int = 6
    day_fetches_week: bool = True

    @property
    def tz(self) -> ZoneInfo:
        return _zone(self.timezone)

    def today(self) -> date:
        return datetime.now(self.tz).date()


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone: {name!r}") from e


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env` (defaults to os.environ after loading .env).

    Raises ConfigurationError for values that cannot be used.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    timezone = env.get("ZUTPLAN_TIMEZONE", "").strip() or DEFAULT_TIMEZONE
    _zone(timezone)

    cache_dir = env.get("ZUTPLAN_CACHE_DIR", "").strip()
    return Settings(
        timezone=timezone,
        cache_dir=Path(cache_dir).expanduser() if cache_dir else _default_cache_dir(),
        request_timeout=_float(env, "ZUTPLAN_REQUEST_TIMEOUT", 20.0),
        plan_url=env.get("ZUTPLAN_PLAN_URL", "").strip() or DEFAULT_PLAN_URL,
        suggest_url=env.get("ZUTPLAN_SUGGEST_URL", "").strip() or DEFAULT_SUGGEST_URL,
        plan_ttl_minutes=_int(env, "ZUTPLAN_PLAN_TTL_MINUTES", 30),
        periods_ttl_hours=_int(env, "ZUTPLAN_PERIODS_TTL_HOURS", 6),
        day_fetches_week=_bool(env, "ZUTPLAN_DAY_FETCHES_WEEK", True),
    )
