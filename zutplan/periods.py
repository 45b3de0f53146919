"""
Academic calendar periods (exam sessions, teaching breaks, holidays).

The university publishes its academic calendar as an HTML page. We extract
the plain text with BeautifulSoup, look for known period names and take the
first two dd.mm.yyyy dates that follow each match as start and end.

Periods are passed into the ScheduleResult unmodified; the helpers below only
answer questions about them for a given day.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup

from zutplan.model import SessionPeriod

GENERIC_BREAK = "przerwa_dydaktyczna"

# Order matters: specific breaks are listed before the generic one.
PERIOD_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("sesja_zimowa", re.compile(r"sesja\s+zimowa", re.I)),
    ("sesja_letnia", re.compile(r"sesja\s+letnia", re.I)),
    ("sesja_poprawkowa", re.compile(r"sesja\s+poprawkowa", re.I)),
    (
        "przerwa_dydaktyczna_zimowa",
        re.compile(r"przerwa\s+od\s+zaj[eę]\w*\s+dydaktycznych\s+w\s+semestrze\s+zimowym", re.I),
    ),
    (
        "przerwa_dydaktyczna_letnia",
        re.compile(r"przerwa\s+od\s+zaj[eę]\w*\s+dydaktycznych\s+w\s+semestrze\s+letnim", re.I),
    ),
    (GENERIC_BREAK, re.compile(r"przerwa\s+od\s+zaj[eę]\w*\s+dydaktycznych", re.I)),
    ("wakacje_zimowe", re.compile(r"(wakacje|ferie)\s+zimowe", re.I)),
    ("wakacje_letnie", re.compile(r"wakacje\s+letnie", re.I)),
]

_DATE_RE = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})")
_YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# how far after a period name we look for its two dates
_LOOKAHEAD_CHARS = 120


def _page_text(html: str) -> str:
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", text)


def parse_calendar_html(html: str) -> list[SessionPeriod]:
    """
    Extract session periods from the academic calendar page.

    Duplicates are dropped; the generic teaching break is dropped when a
    semester-specific one was found. Result is sorted by start date.
    """
    if not html or not html.strip():
        return []

    text = _page_text(html)
    results: list[SessionPeriod] = []
    seen: set[tuple[str, str, str]] = set()
    has_specific_break = False

    for key, pattern in PERIOD_PATTERNS:
        for match in pattern.finditer(text):
            after = text[match.end() : match.end() + _LOOKAHEAD_CHARS]
            dates = _DATE_RE.findall(after)
            if len(dates) < 2:
                continue

            (d1, m1, y1), (d2, m2, y2) = dates[0], dates[1]
            start = f"{y1}-{m1}-{d1}"
            end = f"{y2}-{m2}-{d2}"
            if start > end:
                continue

            dedup = (key, start, end)
            if dedup in seen:
                continue
            seen.add(dedup)
            results.append(SessionPeriod(key=key, start=start, end=end))

            if key.startswith(GENERIC_BREAK + "_"):
                has_specific_break = True

    if has_specific_break:
        results = [p for p in results if p.key != GENERIC_BREAK]

    return sorted(results, key=lambda p: p.start)


def parse_session_periods(rows: Any) -> list[SessionPeriod]:
    """
    Accept period rows from JSON ({key, start, end}) and keep the well-formed ones.
    """
    if not isinstance(rows, list):
        return []
    out: list[SessionPeriod] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        key, start, end = row.get("key"), row.get("start"), row.get("end")
        if not all(isinstance(x, str) for x in (key, start, end)):
            continue
        if not (_YMD_RE.match(start) and _YMD_RE.match(end)):
            continue
        out.append(SessionPeriod(key=key, start=start, end=end))
    return out


def period_kind(key: str) -> str:
    """
    'session', 'break' or 'holiday'.
    """
    if key.startswith("sesja_"):
        return "session"
    if key.startswith("przerwa_"):
        return "break"
    return "holiday"


def active_periods(day: str, periods: Iterable[SessionPeriod]) -> list[SessionPeriod]:
    """
    Periods whose [start, end] contains `day` (YYYY-MM-DD).
    """
    return [p for p in periods if p.start <= day <= p.end]


def transition_markers(
    day: str, prev_day: Optional[str], periods: Iterable[SessionPeriod]
) -> list[tuple[str, SessionPeriod]]:
    """
    ("end", p) for periods that ended between prev_day and day,
    ("start", p) for periods starting on day.
    """
    markers: list[tuple[str, SessionPeriod]] = []
    for p in periods:
        if prev_day and prev_day <= p.end < day:
            markers.append(("end", p))
        if p.start == day:
            markers.append(("start", p))
    return markers


def week_separator(left: str, right: str, periods: Iterable[SessionPeriod]) -> Optional[SessionPeriod]:
    """
    First period that `left` and `right` disagree on (one inside, one outside).
    """
    for p in periods:
        left_in = p.start <= left <= p.end
        right_in = p.start <= right <= p.end
        if left_in != right_in:
            return p
    return None
