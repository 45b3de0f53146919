"""
Terminal rendering of a ScheduleResult with rich.

- day/week: one table column per day, one line per event; headings show
  the active period and where periods start (>>) or end (<<)
- month: a 6x7 grid, days with events marked with '*'
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from zutplan.model import DayColumn, LaidOutEvent, ScheduleResult, SessionPeriod, ViewMode
from zutplan.periods import active_periods, period_kind, transition_markers, week_separator
from zutplan.ranges import WEEKDAY_SHORT

CATEGORY_STYLES = {
    "lecture": "blue",
    "lab": "green",
    "auditory": "cyan",
    "exam": "bold red",
    "remote": "magenta",
    "cancelled": "strike dim",
    "pass": "yellow",
    "project": "bright_green",
    "seminar": "bright_cyan",
    "diploma": "bright_magenta",
    "lectorate": "bright_blue",
    "conversatory": "bright_cyan",
    "consultation": "bright_yellow",
    "field": "green",
}

PERIOD_STYLES = {"session": "red", "break": "blue", "holiday": "green"}


def event_line(item: LaidOutEvent) -> str:
    ev = item.event
    style = CATEGORY_STYLES.get(ev.category.value, "")
    text = escape(f"{ev.start_str}-{ev.end_str} {ev.title} [{ev.category_label}] {ev.room}")
    if item.column_count > 1:
        text += f" ({item.column + 1}/{item.column_count})"
    return f"[{style}]{text}[/]" if style else text


def _period_tag(p: SessionPeriod) -> str:
    return f"[{PERIOD_STYLES[period_kind(p.key)]}]{p.key}[/]"


def day_heading(day: date, periods: Sequence[SessionPeriod], is_today: bool = False) -> str:
    """
    Weekday and date, the active period, and where periods start or end that day.
    """
    day_iso = day.isoformat()
    prev_iso = (day - timedelta(days=1)).isoformat()

    heading = f"{WEEKDAY_SHORT[day.weekday()]} {day.strftime('%d.%m')}"
    active = active_periods(day_iso, periods)
    if active:
        heading += f"\n{_period_tag(active[0])}"
    for kind, p in transition_markers(day_iso, prev_iso, periods):
        arrow = ">>" if kind == "start" else "<<"
        heading += f"\n{arrow} {_period_tag(p)}"
    return f"[bold]{heading}[/]" if is_today else heading


def period_boundaries(columns: Sequence[DayColumn], periods: Sequence[SessionPeriod]) -> list[str]:
    """
    One line per pair of neighbouring columns that fall on different sides of a period.
    """
    lines: list[str] = []
    for left, right in zip(columns, columns[1:]):
        p = week_separator(left.date.isoformat(), right.date.isoformat(), periods)
        if p is not None:
            lines.append(
                f"| {WEEKDAY_SHORT[left.date.weekday()]} / {WEEKDAY_SHORT[right.date.weekday()]}: "
                f"{_period_tag(p)} ({period_kind(p.key)})"
            )
    return lines


def render_columns(result: ScheduleResult, console: Console) -> None:
    table = Table(title=result.header_label, box=box.SIMPLE)
    for col in result.day_columns:
        table.add_column(day_heading(col.date, result.session_periods, col.date == result.today_date))

    max_len = max((len(col.events) for col in result.day_columns), default=0)
    for r in range(max_len):
        row = []
        for col in result.day_columns:
            row.append(event_line(col.events[r]) if r < len(col.events) else "")
        table.add_row(*row)

    console.print(table)
    for line in period_boundaries(result.day_columns, result.session_periods):
        console.print(line)
    if not result.has_any_events_in_range:
        console.print("No classes in this range.")


def render_month(result: ScheduleResult, console: Console) -> None:
    table = Table(title=result.header_label, box=box.SIMPLE)
    for name in WEEKDAY_SHORT:
        table.add_column(name, justify="right")

    for week in result.month_grid:
        cells = []
        for cell in week:
            text = f"{cell.date.day:2d}{'*' if cell.has_events else ' '}"
            if not cell.in_current_month:
                text = f"[dim]{text}[/]"
            elif cell.date == result.today_date:
                text = f"[bold reverse]{text}[/]"
            cells.append(text)
        table.add_row(*cells)

    console.print(table)


def render_schedule(result: ScheduleResult, console: Console) -> None:
    if result.view_mode is ViewMode.MONTH:
        render_month(result, console)
    else:
        render_columns(result, console)
    console.print(f"prev: {result.prev_date}  next: {result.next_date}  today: {result.today_date}")
