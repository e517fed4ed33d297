"""Tests for vibecal/calendar/queries.py"""

from datetime import date, time

from vibecal.calendar.models import Event, EventStatus
from vibecal.calendar.queries import (
    events_between,
    events_in_week,
    events_on,
    summarize,
    week_start,
)


def event(day: date, start: time, status: EventStatus = EventStatus.CONFIRMED) -> Event:
    return Event(title=f"{day} {start}", date=day, time=start, status=status)


EVENTS = [
    event(date(2024, 1, 3), time(14, 0)),
    event(date(2024, 1, 1), time(11, 0), EventStatus.PENDING),
    event(date(2024, 1, 1), time(9, 0)),
    event(date(2024, 1, 8), time(9, 0)),
]


class TestListings:
    """Tests for day, range and week listings."""

    def test_events_on_sorted(self):
        assert [e.time for e in events_on(EVENTS, date(2024, 1, 1))] == [time(9, 0), time(11, 0)]

    def test_events_between_inclusive(self):
        listed = events_between(EVENTS, date(2024, 1, 1), date(2024, 1, 3))
        assert [e.date.day for e in listed] == [1, 1, 3]

    def test_week_starts_on_sunday(self):
        assert week_start(date(2024, 1, 3)) == date(2023, 12, 31)
        assert week_start(date(2023, 12, 31)) == date(2023, 12, 31)

    def test_events_in_week(self):
        week = events_in_week(EVENTS, date(2024, 1, 2))

        assert list(week) == [date(2023, 12, 31)] + [date(2024, 1, d) for d in range(1, 7)]
        assert len(week[date(2024, 1, 1)]) == 2
        assert date(2024, 1, 8) not in week


class TestSummarize:
    """Tests for dashboard counters."""

    def test_counts(self):
        stats = summarize(EVENTS, date(2024, 1, 1), conflicts=[{"conflict_with": "x"}])

        assert stats == {"today": 2, "confirmed": 3, "pending": 1, "conflicts": 1}

    def test_empty(self):
        assert summarize([], date(2024, 1, 1)) == {
            "today": 0,
            "confirmed": 0,
            "pending": 0,
            "conflicts": 0,
        }
