"""Month grid: always 6 weeks x 7 days, Monday first."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from zutplan.model import MonthCell
from zutplan.ranges import week_start

GRID_ROWS = 6
GRID_COLS = 7


def build_month_grid(anchor: date, dates_with_events: Iterable[date]) -> list[list[MonthCell]]:
    """
    Return 6 rows of 7 cells starting on the Monday on/before the 1st of
    `anchor`'s month. Trailing cells of the next month are always included.
    """
    present = set(dates_with_events)
    grid_start = week_start(anchor.replace(day=1))

    grid: list[list[MonthCell]] = []
    for row in range(GRID_ROWS):
        week: list[MonthCell] = []
        for col in range(GRID_COLS):
            day = grid_start + timedelta(days=row * GRID_COLS + col)
            week.append(
                MonthCell(
                    date=day,
                    has_events=day in present,
                    in_current_month=(day.year, day.month) == (anchor.year, anchor.month),
                )
            )
        grid.append(week)
    return grid
