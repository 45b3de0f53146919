"""
Normalization of raw plan rows (upstream JSON -> NormalizedEvent).

Upstream rows are loosely typed: field names vary, most fields are optional
and values may be empty strings or missing. This module is the only place
that knows about those aliases. Everything downstream works on the typed
NormalizedEvent.

Rules:
- start and end are required; rows without them are dropped (no error)
- text fields take the first non-empty value of their aliases
- end is floored to start + MIN_EVENT_MINUTES so short rows stay visible
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any, Iterable, Optional

from dateutil.parser import isoparse

from zutplan.classify import category_label, classify
from zutplan.model import MIN_EVENT_MINUTES, NormalizedEvent

log = logging.getLogger(__name__)

ROOM_PLACEHOLDER = "-"


def first_non_empty(*values: Any) -> str:
    """
    Return the first value that is a non-blank string (stripped), else ''.
    """
    for value in values:
        if isinstance(value, str):
            trimmed = value.strip()
            if trimmed:
                return trimmed
    return ""


def ensure_array(value: Any) -> list[Any]:
    """
    Upstream sometimes sends a single object where a list is expected.
    """
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]


def parse_instant(text: str, tz: tzinfo) -> Optional[datetime]:
    """
    Parse an ISO-like timestamp into an aware datetime in `tz`.

    Naive timestamps are taken as local time in `tz`; aware ones are converted.
    Returns None if the text cannot be parsed.
    """
    if not text:
        return None
    try:
        parsed = isoparse(text.strip().replace(" ", "T", 1))
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def normalize_occurrence(raw: dict[str, Any], tz: tzinfo) -> Optional[NormalizedEvent]:
    """
    Convert one raw upstream row into a NormalizedEvent, or None if rejected.
    """
    start_text = first_non_empty(raw.get("start"))
    end_text = first_non_empty(raw.get("end"))
    if not start_text or not end_text:
        return None

    start = parse_instant(start_text, tz)
    end = parse_instant(end_text, tz)
    if start is None or end is None:
        return None

    min_end = start + timedelta(minutes=MIN_EVENT_MINUTES)
    if end < min_end:
        end = min_end

    subject = first_non_empty(raw.get("subject"))
    title = first_non_empty(raw.get("title"))
    lesson_form = first_non_empty(raw.get("lesson_form"))
    lesson_form_short = first_non_empty(raw.get("lesson_form_short"))
    lesson_status = first_non_empty(raw.get("lesson_status"))
    lesson_status_short = first_non_empty(raw.get("lesson_status_short"))

    category = classify(
        lesson_form=lesson_form,
        lesson_form_short=lesson_form_short,
        lesson_status_short=lesson_status_short,
        subject=subject or title,
    )

    return NormalizedEvent(
        start=start,
        end=end,
        title=first_non_empty(subject, title),
        description=first_non_empty(raw.get("description")),
        room=first_non_empty(raw.get("room"), ROOM_PLACEHOLDER),
        teacher=first_non_empty(raw.get("worker_title"), raw.get("worker")),
        group=first_non_empty(raw.get("group_name"), raw.get("tok_name")),
        lesson_form=lesson_form,
        lesson_form_short=lesson_form_short,
        lesson_status=lesson_status,
        lesson_status_short=lesson_status_short,
        category=category,
        category_label=category_label(category, lesson_form),
        subject_key=first_non_empty(subject, title),
    )


def normalize_occurrences(rows: Iterable[Any], tz: tzinfo) -> list[NormalizedEvent]:
    """
    Normalize many rows, silently dropping the ones that are not usable.
    """
    events: list[NormalizedEvent] = []
    dropped = 0
    for row in rows:
        ev = normalize_occurrence(row, tz) if isinstance(row, dict) else None
        if ev is None:
            dropped += 1
            continue
        events.append(ev)

    if dropped:
        log.debug("Dropped %d incomplete plan rows (kept %d)", dropped, len(events))
    return events
