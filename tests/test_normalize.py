"""
Unit tests for normalization of raw plan rows.

Contract:
- rows without a parseable start or end are dropped, never raised
- text fields take the first non-empty alias
- room defaults to "-"
- end is floored to start + 15 minutes
"""

import unittest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from zutplan.model import EventCategory
from zutplan.normalize import (
    ensure_array,
    first_non_empty,
    normalize_occurrence,
    normalize_occurrences,
    parse_instant,
)

CET = timezone(timedelta(hours=1))


class TestHelpers(unittest.TestCase):
    def test_first_non_empty(self) -> None:
        self.assertEqual(first_non_empty(None, "", "  ", " a ", "b"), "a")
        self.assertEqual(first_non_empty(None, 5, ""), "")

    def test_ensure_array(self) -> None:
        self.assertEqual(ensure_array(None), [])
        self.assertEqual(ensure_array({"a": 1}), [{"a": 1}])
        self.assertEqual(ensure_array([1, 2]), [1, 2])

    def test_parse_instant_naive_is_local(self) -> None:
        dt = parse_instant("2024-03-12 10:00:00", CET)
        self.assertEqual(dt, datetime(2024, 3, 12, 10, 0, tzinfo=CET))

    def test_parse_instant_converts_offset(self) -> None:
        dt = parse_instant("2024-03-12T09:00:00Z", CET)
        self.assertEqual((dt.hour, dt.minute), (10, 0))
        self.assertEqual(dt.utcoffset(), timedelta(hours=1))

    def test_parse_instant_garbage(self) -> None:
        self.assertIsNone(parse_instant("", CET))
        self.assertIsNone(parse_instant("tomorrow", CET))


class TestNormalizeOccurrence(unittest.TestCase):
    def test_full_row(self) -> None:
        ev = normalize_occurrence(
            {
                "start": "2024-03-12T10:00:00",
                "end": "2024-03-12T11:30:00",
                "title": "Algorytmy (L)",
                "subject": "Algorytmy",
                "room": "WI1-215",
                "worker_title": "dr Jan Kowalski",
                "worker": "Kowalski",
                "group_name": "S1_I_L3",
                "lesson_form": "laboratorium",
                "lesson_form_short": "L",
                "description": "Algorytmy - laboratorium",
            },
            CET,
        )
        self.assertIsNotNone(ev)
        self.assertEqual(ev.title, "Algorytmy")
        self.assertEqual(ev.teacher, "dr Jan Kowalski")
        self.assertEqual(ev.group, "S1_I_L3")
        self.assertEqual(ev.room, "WI1-215")
        self.assertEqual(ev.category, EventCategory.LAB)
        self.assertEqual(ev.category_label, "Laboratorium")
        self.assertEqual((ev.start_minute, ev.end_minute), (600, 690))
        self.assertEqual(ev.tooltip, "Algorytmy - laboratorium")

    def test_aliases(self) -> None:
        ev = normalize_occurrence(
            {
                "start": "2024-03-12T10:00:00",
                "end": "2024-03-12T11:00:00",
                "title": "Fizyka",
                "worker": "Nowak",
                "tok_name": "G1",
                "room": "  ",
            },
            CET,
        )
        self.assertEqual(ev.title, "Fizyka")
        self.assertEqual(ev.subject_key, "Fizyka")
        self.assertEqual(ev.teacher, "Nowak")
        self.assertEqual(ev.group, "G1")
        self.assertEqual(ev.room, "-")
        self.assertEqual(ev.category, EventCategory.CLASS)
        self.assertEqual(ev.category_label, "Zajęcia")

    def test_missing_start_or_end_is_rejected(self) -> None:
        self.assertIsNone(normalize_occurrence({"end": "2024-03-12T11:00:00", "title": "X"}, CET))
        self.assertIsNone(normalize_occurrence({"start": "2024-03-12T10:00:00", "title": "X"}, CET))
        self.assertIsNone(normalize_occurrence({"start": "", "end": "", "title": "X"}, CET))

    def test_unparseable_is_rejected(self) -> None:
        self.assertIsNone(normalize_occurrence({"start": "soon", "end": "later"}, CET))

    def test_short_event_is_floored_to_15_minutes(self) -> None:
        ev = normalize_occurrence({"start": "2024-03-12T10:00:00", "end": "2024-03-12T10:05:00"}, CET)
        self.assertEqual(ev.end - ev.start, timedelta(minutes=15))

        ev = normalize_occurrence({"start": "2024-03-12T10:00:00", "end": "2024-03-12T09:00:00"}, CET)
        self.assertEqual(ev.end - ev.start, timedelta(minutes=15))
        self.assertEqual(ev.end_minute - ev.start_minute, 15)

    def test_utc_rows_land_on_local_day(self) -> None:
        warsaw = ZoneInfo("Europe/Warsaw")
        ev = normalize_occurrence({"start": "2024-03-11T23:30:00Z", "end": "2024-03-12T01:00:00Z"}, warsaw)
        self.assertEqual(ev.day.isoformat(), "2024-03-12")
        self.assertEqual(ev.start_str, "00:30")
        self.assertEqual(ev.end_str, "02:00")

    def test_event_past_midnight_is_clipped(self) -> None:
        ev = normalize_occurrence({"start": "2024-03-12T23:00:00", "end": "2024-03-13T01:00:00"}, CET)
        self.assertEqual(ev.end_minute, 24 * 60)


class TestNormalizeOccurrences(unittest.TestCase):
    def test_drops_bad_rows(self) -> None:
        rows = [
            {},
            "garbage",
            None,
            {"start": "2024-03-12T10:00:00", "end": "2024-03-12T11:00:00", "title": "A"},
            {"title": "no times"},
        ]
        events = normalize_occurrences(rows, CET)
        self.assertEqual([ev.title for ev in events], ["A"])


if __name__ == "__main__":
    unittest.main()
