"""
Unit tests for academic calendar parsing and period helpers.
"""

import unittest

from zutplan.model import SessionPeriod
from zutplan.periods import (
    GENERIC_BREAK,
    active_periods,
    parse_calendar_html,
    parse_session_periods,
    period_kind,
    transition_markers,
    week_separator,
)

CALENDAR_HTML = """
<html><body>
<table>
  <tr><td>Sesja zimowa</td><td>29.01.2024</td><td>-</td><td>11.02.2024</td></tr>
  <tr><td>Przerwa od zajęć dydaktycznych w semestrze zimowym</td>
      <td>23.12.2023 - 01.01.2024</td></tr>
  <tr><td>Przerwa od zajęć dydaktycznych</td><td>28.03.2024 - 02.04.2024</td></tr>
  <tr><td>Sesja letnia</td><td>17.06.2024 - 07.07.2024</td></tr>
  <tr><td>Sesja letnia</td><td>17.06.2024 - 07.07.2024</td></tr>
  <tr><td>Wakacje letnie</td><td>08.07.2024 - 30.09.2024</td></tr>
  <tr><td>Sesja poprawkowa</td><td>tba</td></tr>
</table>
</body></html>
"""


class TestParseCalendar(unittest.TestCase):
    def test_periods_found_and_sorted(self) -> None:
        periods = parse_calendar_html(CALENDAR_HTML)
        keys = [p.key for p in periods]
        self.assertEqual(
            keys,
            ["przerwa_dydaktyczna_zimowa", "sesja_zimowa", "sesja_letnia", "wakacje_letnie"],
        )
        winter = periods[1]
        self.assertEqual((winter.start, winter.end), ("2024-01-29", "2024-02-11"))

    def test_generic_break_kept_without_specific_one(self) -> None:
        html = "<p>Przerwa od zajęć dydaktycznych 28.03.2024 - 02.04.2024</p>"
        periods = parse_calendar_html(html)
        self.assertEqual([(p.key, p.start, p.end) for p in periods], [(GENERIC_BREAK, "2024-03-28", "2024-04-02")])

    def test_empty_page(self) -> None:
        self.assertEqual(parse_calendar_html(""), [])
        self.assertEqual(parse_calendar_html("<p>nothing here</p>"), [])


class TestParseSessionPeriods(unittest.TestCase):
    def test_keeps_well_formed_rows(self) -> None:
        rows = [
            {"key": "sesja_letnia", "start": "2024-06-17", "end": "2024-07-07"},
            {"key": "bad", "start": "17.06.2024", "end": "2024-07-07"},
            {"key": "missing"},
            "garbage",
        ]
        self.assertEqual(parse_session_periods(rows), [SessionPeriod("sesja_letnia", "2024-06-17", "2024-07-07")])
        self.assertEqual(parse_session_periods(None), [])


class TestHelpers(unittest.TestCase):
    PERIODS = [
        SessionPeriod("sesja_zimowa", "2024-01-29", "2024-02-11"),
        SessionPeriod("wakacje_zimowe", "2024-02-12", "2024-02-18"),
    ]

    def test_kind(self) -> None:
        self.assertEqual(period_kind("sesja_letnia"), "session")
        self.assertEqual(period_kind("przerwa_dydaktyczna"), "break")
        self.assertEqual(period_kind("wakacje_letnie"), "holiday")

    def test_active(self) -> None:
        self.assertEqual([p.key for p in active_periods("2024-02-11", self.PERIODS)], ["sesja_zimowa"])
        self.assertEqual(active_periods("2024-03-01", self.PERIODS), [])

    def test_transition_markers(self) -> None:
        markers = transition_markers("2024-02-12", "2024-02-11", self.PERIODS)
        self.assertEqual([(kind, p.key) for kind, p in markers], [("end", "sesja_zimowa"), ("start", "wakacje_zimowe")])
        self.assertEqual(transition_markers("2024-01-29", None, self.PERIODS)[0][0], "start")

    def test_week_separator(self) -> None:
        self.assertEqual(week_separator("2024-02-11", "2024-02-12", self.PERIODS).key, "sesja_zimowa")
        self.assertIsNone(week_separator("2024-01-30", "2024-01-31", self.PERIODS))


if __name__ == "__main__":
    unittest.main()
