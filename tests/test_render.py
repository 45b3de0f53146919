"""
Tests for terminal rendering of academic calendar periods.

Week used here: 2024-02-05 .. 2024-02-11 with the winter session ending on
Thursday and the winter holidays starting on Friday.
"""

import io
import unittest
from datetime import date, timedelta, timezone

from rich.console import Console

from zutplan.engine import build_schedule
from zutplan.model import DayColumn, SessionPeriod
from zutplan.render import day_heading, period_boundaries, render_schedule

CET = timezone(timedelta(hours=1))
PERIODS = [
    SessionPeriod("sesja_zimowa", "2024-01-29", "2024-02-08"),
    SessionPeriod("wakacje_zimowe", "2024-02-09", "2024-02-18"),
]


class TestDayHeading(unittest.TestCase):
    def test_plain_day(self) -> None:
        self.assertEqual(day_heading(date(2024, 3, 12), PERIODS), "Tue 12.03")

    def test_active_period_and_start_marker(self) -> None:
        heading = day_heading(date(2024, 2, 9), PERIODS)
        self.assertIn("wakacje_zimowe", heading)
        self.assertIn(">> ", heading)
        self.assertIn("<< ", heading)
        self.assertIn("sesja_zimowa", heading)

    def test_inside_period_has_no_markers(self) -> None:
        heading = day_heading(date(2024, 2, 6), PERIODS)
        self.assertIn("sesja_zimowa", heading)
        self.assertNotIn(">>", heading)
        self.assertNotIn("<<", heading)

    def test_today_is_bold(self) -> None:
        self.assertTrue(day_heading(date(2024, 3, 12), [], is_today=True).startswith("[bold]"))


class TestPeriodBoundaries(unittest.TestCase):
    def test_boundary_between_thursday_and_friday(self) -> None:
        columns = [DayColumn(date(2024, 2, 5) + timedelta(days=i)) for i in range(7)]
        lines = period_boundaries(columns, PERIODS)
        self.assertEqual(len(lines), 1)
        self.assertIn("Thu / Fri", lines[0])
        self.assertIn("sesja_zimowa", lines[0])

    def test_no_periods(self) -> None:
        columns = [DayColumn(date(2024, 3, 11) + timedelta(days=i)) for i in range(7)]
        self.assertEqual(period_boundaries(columns, []), [])


class TestRenderSchedule(unittest.TestCase):
    def test_week_output_mentions_boundary(self) -> None:
        rows = [{"start": "2024-02-05T10:00:00", "end": "2024-02-05T11:00:00", "title": "Egzamin z analizy"}]
        result = build_schedule(
            "week", "2024-02-07", rows, tz=CET, today=date(2024, 2, 7), session_periods=PERIODS
        )
        buf = io.StringIO()
        render_schedule(result, Console(file=buf, width=250, color_system=None))
        out = buf.getvalue()
        self.assertIn("Thu / Fri", out)
        self.assertIn("Egzamin z analizy", out)
        self.assertNotIn("No classes", out)


if __name__ == "__main__":
    unittest.main()
