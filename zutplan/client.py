from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Any, Dict, List, Optional

import requests

from zutplan.config import Settings
from zutplan.exceptions import UpstreamError
from zutplan.model import SessionPeriod
from zutplan.normalize import ensure_array, first_non_empty
from zutplan.periods import parse_calendar_html

log = logging.getLogger(__name__)

USER_AGENT = "zutplan/0.1 (+https://plan.zut.edu.pl)"


# ---------------------------------------------------------------------------
# Query building
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlanIdentity:
    """
    Who or what the plan is for: a student album number, or a search filter.
    """

    album: str = ""
    search_category: str = ""
    query: str = ""

    @property
    def is_search(self) -> bool:
        return bool(first_non_empty(self.query))

    @property
    def is_empty(self) -> bool:
        return not self.is_search and not first_non_empty(self.album)

    @property
    def key(self) -> str:
        """
        Opaque string used in cache keys and diagnostics.
        """
        if self.is_search:
            return f"{map_search_category(self.search_category)}:{self.query.strip()}"
        return f"number:{self.album.strip()}" if self.album.strip() else ""


def map_search_category(category: str) -> str:
    """
    Map a loose search category (English or Polish) to the upstream parameter.
    """
    key = (category or "").lower()
    if "teacher" in key or "wyk" in key:
        return "teacher"
    if "room" in key or "sal" in key:
        return "room"
    if "group" in key or "grup" in key:
        return "group"
    if "subject" in key or "przedm" in key:
        return "subject"
    return "number"


def to_offset_iso(day: date, at: time, tz: tzinfo) -> str:
    """
    'YYYY-MM-DDTHH:MM:SS+HH:MM' for a local wall-clock time.
    """
    return datetime.combine(day, at, tzinfo=tz).isoformat(timespec="seconds")


def build_plan_query(identity: PlanIdentity, fetch_start: date, fetch_end: date, tz: tzinfo) -> Dict[str, str]:
    """
    Query parameters for the student plan endpoint covering whole local days.
    """
    if identity.is_search:
        params = {map_search_category(identity.search_category): identity.query.strip()}
    else:
        params = {"number": identity.album.strip()}
    params["start"] = to_offset_iso(fetch_start, time(0, 0, 0), tz)
    params["end"] = to_offset_iso(fetch_end, time(23, 59, 59), tz)
    return params


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


class PlanClient:
    """
    Thin wrapper around the timetable service endpoints.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        try:
            resp = self.session.get(url, params=params, timeout=self.settings.request_timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise UpstreamError(f"Plan request failed: {e}") from e

        if not resp.text.strip():
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}") from e

    def fetch_plan_rows(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Raw plan rows for the given query. Non-object entries are skipped
        (the service pads the list with an empty first element).
        """
        log.info("Fetching plan rows %s..%s", params.get("start", ""), params.get("end", ""))
        data = self._get_json(self.settings.plan_url, params)
        rows = [row for row in ensure_array(data) if isinstance(row, dict) and row]
        log.info("Received %d plan rows", len(rows))
        return rows

    def fetch_suggestions(self, kind: str, query: str) -> List[str]:
        """
        Autocomplete values for a search category. Empty on any failure.
        """
        kind = (kind or "").strip()
        query = (query or "").strip()
        if not kind or not query:
            return []
        try:
            data = self._get_json(self.settings.suggest_url, {"kind": kind, "query": query})
        except UpstreamError as e:
            log.warning("Suggestions unavailable: %s", e)
            return []
        out: List[str] = []
        for row in ensure_array(data):
            item = first_non_empty(row.get("item")) if isinstance(row, dict) else ""
            if item:
                out.append(item)
        return out

    def fetch_session_periods(self) -> List[SessionPeriod]:
        """
        Try each academic calendar page until one yields periods.
        """
        for url in self.settings.calendar_urls:
            try:
                resp = self.session.get(url, timeout=self.settings.request_timeout)
                resp.raise_for_status()
            except requests.RequestException as e:
                log.debug("Calendar page %s unavailable: %s", url, e)
                continue
            periods = parse_calendar_html(resp.text)
            if periods:
                log.info("Found %d session periods at %s", len(periods), url)
                return periods
        return []
