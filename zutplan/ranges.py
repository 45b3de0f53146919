"""
Range resolution for the timetable views.

Given a view mode and an anchor date this module computes:
- the visible date span (what the user sees)
- the fetch span (what is requested upstream, may be wider)
- the previous / next anchor dates for navigation

Weeks start on Monday. An anchor that cannot be parsed silently becomes
"today" (which callers pass in explicitly, so tests never depend on the clock).
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Optional

from zutplan.model import ViewMode, ViewRange

WEEKDAY_SHORT = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_NAMES = [
    "",
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def parse_anchor_date(value: Any, today: date) -> date:
    """
    Turn an anchor (date, datetime or 'YYYY-MM-DD...' text) into a calendar date.

    The time-of-day is ignored. Unparseable input falls back to `today`.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()[:10]
        try:
            return datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            return today
    return today


def week_start(day: date) -> date:
    """
    Monday on or before `day`.
    """
    # isoweekday(): Monday=1 .. Sunday=7
    return day - timedelta(days=day.isoweekday() - 1)


def month_bounds(day: date) -> tuple[date, date]:
    first = day.replace(day=1)
    last = day.replace(day=calendar.monthrange(day.year, day.month)[1])
    return first, last


def _shift_month(day: date, months: int) -> date:
    """
    First day of the month `months` away from `day`'s month.
    """
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def resolve_view_range(
    view_mode: ViewMode | str,
    anchor: Any,
    today: Optional[date] = None,
    day_fetches_week: bool = True,
) -> ViewRange:
    """
    Compute visible range, fetch range and navigation cursors for one view.

    In day mode the whole containing week is fetched when `day_fetches_week`
    is set, so navigating between days of that week needs no new request.
    """
    mode = ViewMode.coerce(view_mode)
    current = parse_anchor_date(anchor, today or date.today())

    if mode is ViewMode.DAY:
        if day_fetches_week:
            fetch_start = week_start(current)
            fetch_end = fetch_start + timedelta(days=6)
        else:
            fetch_start = fetch_end = current
        return ViewRange(
            current=current,
            range_start=current,
            range_end=current,
            prev=current - timedelta(days=1),
            next=current + timedelta(days=1),
            fetch_start=fetch_start,
            fetch_end=fetch_end,
        )

    if mode is ViewMode.MONTH:
        first, last = month_bounds(current)
        return ViewRange(
            current=current,
            range_start=first,
            range_end=last,
            prev=_shift_month(current, -1),
            next=_shift_month(current, 1),
            fetch_start=first,
            fetch_end=last,
        )

    start = week_start(current)
    end = start + timedelta(days=6)
    return ViewRange(
        current=current,
        range_start=start,
        range_end=end,
        prev=current - timedelta(days=7),
        next=current + timedelta(days=7),
        fetch_start=start,
        fetch_end=end,
    )


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def format_header_label(view_mode: ViewMode | str, view_range: ViewRange) -> str:
    mode = ViewMode.coerce(view_mode)
    current = view_range.current
    if mode is ViewMode.DAY:
        return f"{WEEKDAY_SHORT[current.weekday()]}, {current.strftime('%d.%m.%Y')}"
    if mode is ViewMode.MONTH:
        return f"{MONTH_NAMES[current.month]} {current.year}"
    left = view_range.range_start.strftime("%d.%m")
    right = view_range.range_end.strftime("%d.%m.%Y")
    return f"{left} - {right}"
