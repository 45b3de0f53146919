"""
Overlap layout for one day of events.

Events of a day are split into clusters (maximal groups whose intervals
transitively overlap). Inside a cluster every event gets a column by greedy
first-fit, which uses as few columns as the largest number of events running
at the same instant. All events of a cluster share width 100 / columns.

Overlap rule (half-open intervals, touching endpoints do not overlap):
    start < other_end AND end > other_start
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Sequence

from zutplan.model import LaidOutEvent, NormalizedEvent


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def _sort_key(ev: NormalizedEvent) -> tuple[int, int]:
    return (ev.start_minute, ev.end_minute)


def find_clusters(events: Sequence[NormalizedEvent]) -> list[list[int]]:
    """
    Partition events into overlap clusters.

    Returns lists of indexes into `events`, each cluster in (start, end) order.
    """
    order = sorted(range(len(events)), key=lambda i: _sort_key(events[i]))
    clusters: list[list[int]] = []

    cursor = 0
    while cursor < len(order):
        cluster = [order[cursor]]
        cluster_end = events[order[cursor]].end_minute
        cursor += 1

        while cursor < len(order) and events[order[cursor]].start_minute < cluster_end:
            idx = order[cursor]
            cluster.append(idx)
            cluster_end = max(cluster_end, events[idx].end_minute)
            cursor += 1

        clusters.append(cluster)

    return clusters


def _assign_columns(events: Sequence[NormalizedEvent], cluster: list[int]) -> tuple[dict[int, int], int]:
    """
    Greedy first-fit: reuse the first column that is free at the event's start.
    """
    free_at: list[int] = []
    placement: dict[int, int] = {}

    for idx in cluster:
        ev = events[idx]
        column = -1
        for i, free in enumerate(free_at):
            if free <= ev.start_minute:
                column = i
                break

        if column == -1:
            column = len(free_at)
            free_at.append(ev.end_minute)
        else:
            free_at[column] = ev.end_minute

        placement[idx] = column

    return placement, max(1, len(free_at))


def layout_day_events(events: Sequence[NormalizedEvent]) -> list[LaidOutEvent]:
    """
    Lay out all events of a single day. Output order matches input order.
    """
    if len(events) < 2:
        return [LaidOutEvent(event=ev, start_minute=ev.start_minute, end_minute=ev.end_minute) for ev in events]

    laid_out: list[LaidOutEvent | None] = [None] * len(events)

    for cluster in find_clusters(events):
        placement, columns = _assign_columns(events, cluster)
        width = 100.0 / columns
        for idx, column in placement.items():
            ev = events[idx]
            laid_out[idx] = LaidOutEvent(
                event=ev,
                start_minute=ev.start_minute,
                end_minute=ev.end_minute,
                column=column,
                column_count=columns,
                left_pct=column * width,
                width_pct=width,
            )

    return [item for item in laid_out if item is not None]


def find_conflicts(events: Sequence[NormalizedEvent]) -> list[tuple[NormalizedEvent, NormalizedEvent]]:
    """
    Find overlapping event pairs (A, B) on the same day, each pair once.

    Overlapping events are never dropped or merged by the layout; this is only
    a report.
    """
    by_day: dict[date, list[NormalizedEvent]] = defaultdict(list)
    for ev in events:
        by_day[ev.day].append(ev)

    conflicts: list[tuple[NormalizedEvent, NormalizedEvent]] = []
    for day in sorted(by_day):
        day_events = sorted(by_day[day], key=_sort_key)
        # O(n^2) is fine for typical timetable sizes
        for i in range(len(day_events)):
            a = day_events[i]
            for j in range(i + 1, len(day_events)):
                b = day_events[j]
                if overlaps(a.start_minute, a.end_minute, b.start_minute, b.end_minute):
                    conflicts.append((a, b))

    return conflicts
