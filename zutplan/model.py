"""
Central data model definitions used across the project.

This module defines the canonical structure of the schedule objects so that:
- all modules share the same field names
- the engine, the cache and the CLI exchange the same shapes
- a ScheduleResult can be written to JSON and read back without loss
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

MINUTES_PER_DAY = 24 * 60
MIN_EVENT_MINUTES = 15


class ViewMode(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def coerce(cls, value: Any) -> "ViewMode":
        """
        Accept a ViewMode or its string value. Anything else becomes WEEK.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.WEEK


class EventCategory(str, Enum):
    LECTURE = "lecture"
    LAB = "lab"
    AUDITORY = "auditory"
    EXAM = "exam"
    REMOTE = "remote"
    CANCELLED = "cancelled"
    PASS = "pass"
    PROJECT = "project"
    SEMINAR = "seminar"
    DIPLOMA = "diploma"
    LECTORATE = "lectorate"
    CONVERSATORY = "conversatory"
    CONSULTATION = "consultation"
    FIELD = "field"
    CLASS = "class"


@dataclass(frozen=True)
class NormalizedEvent:
    """
    Represents one concrete class occurrence after normalization.

    start/end are timezone-aware instants in the configured local zone.
    end is always at least MIN_EVENT_MINUTES after start.
    """

    start: datetime
    end: datetime
    title: str
    description: str = ""
    room: str = "-"
    teacher: str = ""
    group: str = ""
    lesson_form: str = ""
    lesson_form_short: str = ""
    lesson_status: str = ""
    lesson_status_short: str = ""
    category: EventCategory = EventCategory.CLASS
    category_label: str = ""
    subject_key: str = ""

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def start_minute(self) -> int:
        return self.start.hour * 60 + self.start.minute

    @property
    def end_minute(self) -> int:
        # events running past midnight are clipped to the end of their start day
        if self.end.date() > self.start.date():
            end_min = MINUTES_PER_DAY
        else:
            end_min = self.end.hour * 60 + self.end.minute
        return max(self.start_minute + MIN_EVENT_MINUTES, end_min)

    @property
    def start_str(self) -> str:
        return self.start.strftime("%H:%M")

    @property
    def end_str(self) -> str:
        return self.end.strftime("%H:%M")

    @property
    def tooltip(self) -> str:
        return self.description or self.subject_key or self.title

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["start"] = self.start.isoformat()
        data["end"] = self.end.isoformat()
        data["category"] = self.category.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedEvent":
        values = dict(data)
        values["start"] = datetime.fromisoformat(values["start"])
        values["end"] = datetime.fromisoformat(values["end"])
        values["category"] = EventCategory(values.get("category", EventCategory.CLASS.value))
        return cls(**values)


@dataclass(frozen=True)
class LaidOutEvent:
    """
    A NormalizedEvent plus its horizontal slot among concurrent events of the day.
    """

    event: NormalizedEvent
    start_minute: int
    end_minute: int
    column: int = 0
    column_count: int = 1
    left_pct: float = 0.0
    width_pct: float = 100.0

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def category(self) -> EventCategory:
        return self.event.category

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event.to_dict(),
            "start_minute": self.start_minute,
            "end_minute": self.end_minute,
            "column": self.column,
            "column_count": self.column_count,
            "left_pct": self.left_pct,
            "width_pct": self.width_pct,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LaidOutEvent":
        values = dict(data)
        values["event"] = NormalizedEvent.from_dict(values["event"])
        return cls(**values)


@dataclass
class DayColumn:
    date: date
    events: List[LaidOutEvent] = field(default_factory=list)


@dataclass(frozen=True)
class MonthCell:
    date: date
    has_events: bool
    in_current_month: bool


@dataclass(frozen=True)
class SessionPeriod:
    """
    One academic calendar period (exam session, teaching break, holidays).

    Dates stay as YYYY-MM-DD strings; they are passed through unmodified.
    """

    key: str
    start: str
    end: str


@dataclass(frozen=True)
class ViewRange:
    current: date
    range_start: date
    range_end: date
    prev: date
    next: date
    fetch_start: date
    fetch_end: date


@dataclass
class Diagnostics:
    entries_total: int = 0
    days_with_data: List[date] = field(default_factory=list)
    identity: str = ""
    album: str = ""


@dataclass
class ScheduleResult:
    """
    Everything a caller needs to render one timetable view.

    day_columns is filled for day/week views, month_grid for the month view.
    """

    view_mode: ViewMode
    current_date: date
    range_start: date
    range_end: date
    fetch_start: date
    fetch_end: date
    prev_date: date
    next_date: date
    today_date: date
    header_label: str
    day_columns: List[DayColumn] = field(default_factory=list)
    month_grid: List[List[MonthCell]] = field(default_factory=list)
    has_any_events_in_range: bool = False
    session_periods: List[SessionPeriod] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def column_for(self, day: date) -> Optional[DayColumn]:
        for col in self.day_columns:
            if col.date == day:
                return col
        return None

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-friendly representation (dates as YYYY-MM-DD strings).
        """
        return {
            "view_mode": self.view_mode.value,
            "current_date": self.current_date.isoformat(),
            "range_start": self.range_start.isoformat(),
            "range_end": self.range_end.isoformat(),
            "fetch_start": self.fetch_start.isoformat(),
            "fetch_end": self.fetch_end.isoformat(),
            "prev_date": self.prev_date.isoformat(),
            "next_date": self.next_date.isoformat(),
            "today_date": self.today_date.isoformat(),
            "header_label": self.header_label,
            "day_columns": [
                {"date": col.date.isoformat(), "events": [ev.to_dict() for ev in col.events]}
                for col in self.day_columns
            ],
            "month_grid": [
                [
                    {
                        "date": cell.date.isoformat(),
                        "has_events": cell.has_events,
                        "in_current_month": cell.in_current_month,
                    }
                    for cell in row
                ]
                for row in self.month_grid
            ],
            "has_any_events_in_range": self.has_any_events_in_range,
            "session_periods": [asdict(p) for p in self.session_periods],
            "diagnostics": {
                "entries_total": self.diagnostics.entries_total,
                "days_with_data": [d.isoformat() for d in self.diagnostics.days_with_data],
                "identity": self.diagnostics.identity,
                "album": self.diagnostics.album,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleResult":
        """
        Inverse of to_dict(). Raises KeyError/ValueError/TypeError on bad input.
        """
        d = date.fromisoformat
        diag = data.get("diagnostics") or {}
        return cls(
            view_mode=ViewMode(data["view_mode"]),
            current_date=d(data["current_date"]),
            range_start=d(data["range_start"]),
            range_end=d(data["range_end"]),
            fetch_start=d(data["fetch_start"]),
            fetch_end=d(data["fetch_end"]),
            prev_date=d(data["prev_date"]),
            next_date=d(data["next_date"]),
            today_date=d(data["today_date"]),
            header_label=str(data["header_label"]),
            day_columns=[
                DayColumn(date=d(col["date"]), events=[LaidOutEvent.from_dict(ev) for ev in col["events"]])
                for col in data.get("day_columns", [])
            ],
            month_grid=[
                [
                    MonthCell(
                        date=d(cell["date"]),
                        has_events=bool(cell["has_events"]),
                        in_current_month=bool(cell["in_current_month"]),
                    )
                    for cell in row
                ]
                for row in data.get("month_grid", [])
            ],
            has_any_events_in_range=bool(data.get("has_any_events_in_range", False)),
            session_periods=[SessionPeriod(**p) for p in data.get("session_periods", [])],
            diagnostics=Diagnostics(
                entries_total=int(diag.get("entries_total", 0)),
                days_with_data=[d(x) for x in diag.get("days_with_data", [])],
                identity=str(diag.get("identity", "")),
                album=str(diag.get("album", "")),
            ),
        )
