"""
Read-only views over a list of events: day and week listings plus the
dashboard counters (today / confirmed / pending / conflicts).

Events are matched on their own wall-clock date, the same date a user
typed when creating them.
"""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Any

from vibecal.calendar.models import Event, EventStatus


def _by_start(event: Event):
    return (event.date, event.time)


def events_on(events: Iterable[Event], day: date) -> list[Event]:
    """Events on a date, earliest first."""
    return sorted((e for e in events if e.date == day), key=_by_start)


def events_between(events: Iterable[Event], start: date, end: date) -> list[Event]:
    """Events dated within [start, end] inclusive, in chronological order."""
    return sorted((e for e in events if start <= e.date <= end), key=_by_start)


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def events_in_week(events: Iterable[Event], day: date) -> dict[date, list[Event]]:
    """Map each day of the Sunday-started week containing ``day`` to its events."""
    first = week_start(day)
    days = [first + timedelta(days=i) for i in range(7)]
    listed = events_between(events, days[0], days[-1])
    return {d: [e for e in listed if e.date == d] for d in days}


def summarize(
    events: Sequence[Event],
    today: date,
    conflicts: Sequence[Any] = (),
) -> dict[str, int]:
    """Counters shown on the dashboard header."""
    return {
        "today": sum(1 for e in events if e.date == today),
        "confirmed": sum(1 for e in events if e.status is EventStatus.CONFIRMED),
        "pending": sum(1 for e in events if e.status is EventStatus.PENDING),
        "conflicts": len(conflicts),
    }
