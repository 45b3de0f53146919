"""
Schedule computation engine.

Turns a requested view plus already-retrieved raw plan rows into a complete
ScheduleResult:

    resolve range -> normalize + classify rows -> group by local day
    -> lay out each visible day (day/week) or build the month grid (month)

The engine does no I/O and keeps no state between calls. "today" is always
passed in by the caller.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, tzinfo
from typing import Any, Iterable, Optional, Sequence

from zutplan.layout import layout_day_events
from zutplan.model import (
    DayColumn,
    Diagnostics,
    NormalizedEvent,
    ScheduleResult,
    SessionPeriod,
    ViewMode,
    ViewRange,
)
from zutplan.month_grid import build_month_grid
from zutplan.normalize import normalize_occurrences
from zutplan.ranges import format_header_label, iter_days, resolve_view_range

log = logging.getLogger(__name__)


# Polish alphabet order, so "Łacina" sorts between "Lingwistyka" and "Matematyka"
POLISH_ALPHABET = "aąbcćdeęfghijklłmnńoópqrsśtuvwxyzźż"
_ALPHABET_RANK = {ch: i for i, ch in enumerate(POLISH_ALPHABET)}


def polish_sort_key(text: str) -> tuple[int, ...]:
    """
    Case-insensitive collation key for Polish titles.

    Characters outside the alphabet (digits, spaces, other scripts) sort by
    code point, before all letters.
    """
    return tuple(
        _ALPHABET_RANK[ch] + 0x110000 if ch in _ALPHABET_RANK else ord(ch)
        for ch in text.casefold()
    )


def _event_order(ev: NormalizedEvent) -> tuple:
    return (ev.start_minute, ev.end_minute, polish_sort_key(ev.title), ev.title)


def group_by_day(events: Iterable[NormalizedEvent]) -> dict[date, list[NormalizedEvent]]:
    grouped: dict[date, list[NormalizedEvent]] = defaultdict(list)
    for ev in events:
        grouped[ev.day].append(ev)
    return dict(grouped)


def build_day_columns(grouped: dict[date, list[NormalizedEvent]], start: date, end: date) -> list[DayColumn]:
    """
    One column per day in [start, end], events sorted and laid out.
    """
    columns: list[DayColumn] = []
    for day in iter_days(start, end):
        day_events = sorted(grouped.get(day, []), key=_event_order)
        columns.append(DayColumn(date=day, events=layout_day_events(day_events)))
    return columns


def _result_shell(
    mode: ViewMode,
    view_range: ViewRange,
    today: date,
    session_periods: Sequence[SessionPeriod],
    identity: str,
    album: str,
) -> ScheduleResult:
    return ScheduleResult(
        view_mode=mode,
        current_date=view_range.current,
        range_start=view_range.range_start,
        range_end=view_range.range_end,
        fetch_start=view_range.fetch_start,
        fetch_end=view_range.fetch_end,
        prev_date=view_range.prev,
        next_date=view_range.next,
        today_date=today,
        header_label=format_header_label(mode, view_range),
        session_periods=list(session_periods),
        diagnostics=Diagnostics(identity=identity, album=album),
    )


def empty_schedule(
    view_mode: ViewMode | str,
    anchor: Any,
    today: date,
    day_fetches_week: bool = True,
    session_periods: Sequence[SessionPeriod] = (),
) -> ScheduleResult:
    """
    Well-formed result without events, used when there is nothing to ask for
    (no study selected and no search filter).
    """
    mode = ViewMode.coerce(view_mode)
    view_range = resolve_view_range(mode, anchor, today=today, day_fetches_week=day_fetches_week)
    return _result_shell(mode, view_range, today, session_periods, identity="", album="")


def build_schedule(
    view_mode: ViewMode | str,
    anchor: Any,
    raw_rows: Iterable[Any],
    tz: tzinfo,
    today: date,
    session_periods: Sequence[SessionPeriod] = (),
    identity: str = "",
    album: str = "",
    day_fetches_week: bool = True,
) -> ScheduleResult:
    """
    Compute the full ScheduleResult for one view.

    Rows outside the visible range are counted in the diagnostics (day view
    receives its whole week) but never produce a DayColumn.
    """
    mode = ViewMode.coerce(view_mode)
    view_range = resolve_view_range(mode, anchor, today=today, day_fetches_week=day_fetches_week)
    result = _result_shell(mode, view_range, today, session_periods, identity=identity, album=album)

    events = normalize_occurrences(raw_rows, tz)
    grouped = group_by_day(events)

    if mode is ViewMode.MONTH:
        result.month_grid = build_month_grid(view_range.current, grouped.keys())
        result.has_any_events_in_range = any(
            view_range.range_start <= day <= view_range.range_end for day in grouped
        )
    else:
        result.day_columns = build_day_columns(grouped, view_range.range_start, view_range.range_end)
        result.has_any_events_in_range = any(col.events for col in result.day_columns)

    result.diagnostics.entries_total = len(events)
    result.diagnostics.days_with_data = sorted(grouped)

    log.debug(
        "Built %s view for %s: %d events on %d days",
        mode.value,
        view_range.current.isoformat(),
        len(events),
        len(grouped),
    )
    return result
