"""
Tool: Availability Slot Finder
Purpose: Suggest start times for a draft inside the daily work window

Scans the work window (09:00-17:00 wall clock in the draft's timezone) in
fixed 30-minute steps from the window start and keeps every start time
whose conflict window is clear and whose nominal end fits in the window.
The scan is greedy: it returns the first few free grid positions, not an
optimal packing.

Usage:
    from vibecal.calendar.availability import find_slots

    find_slots(date(2024, 1, 1), draft, store.snapshot())
    # [time(10, 30), time(11, 0), ...]
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, time, timedelta

from vibecal.calendar import (
    MAX_SLOTS,
    SLOT_STEP_MINUTES,
    WORK_DAY_END_HOUR,
    WORK_DAY_START_HOUR,
)
from vibecal.calendar.conflicts import find_conflicts
from vibecal.calendar.models import Event
from vibecal.calendar.timeconv import resolve_instant, to_local
from vibecal.logging_config import get_logger

logger = get_logger(__name__)


def work_window(
    day: date,
    tz_name: str,
    start_hour: int = WORK_DAY_START_HOUR,
    end_hour: int = WORK_DAY_END_HOUR,
) -> tuple[datetime, datetime]:
    """Return the (start, end) instants of the work window on a date."""
    return (
        resolve_instant(day, time(start_hour, 0), tz_name),
        resolve_instant(day, time(end_hour, 0), tz_name),
    )


def find_slots(
    day: date,
    draft: Event,
    existing: Iterable[Event],
    *,
    start_hour: int = WORK_DAY_START_HOUR,
    end_hour: int = WORK_DAY_END_HOUR,
    step_minutes: int = SLOT_STEP_MINUTES,
    max_slots: int = MAX_SLOTS,
) -> list[time]:
    """
    Find conflict-free start times for the draft on a date.

    Args:
        day: Date to search
        draft: Supplies duration, buffer, timezone and id (ignored as a conflict)
        existing: Events already on the timeline
        start_hour: Work window start, wall clock
        end_hour: Work window end, wall clock
        step_minutes: Grid step from the window start
        max_slots: Stop after this many slots

    Returns:
        Wall-clock start times in the draft's timezone, earliest first

    Raises:
        InvalidTimezone: if the draft's timezone is not recognised
    """
    existing = list(existing)
    window_start, window_end = work_window(day, draft.timezone, start_hour, end_hour)
    duration = timedelta(minutes=draft.duration)
    step = timedelta(minutes=step_minutes)

    slots: list[time] = []
    cursor = window_start

    while cursor + duration <= window_end and len(slots) < max_slots:
        local = to_local(cursor, draft.timezone)
        candidate = replace(
            draft,
            date=local.date(),
            time=local.time(),
        )
        if not find_conflicts(candidate, existing):
            slots.append(candidate.time)
        cursor += step

    logger.debug(
        "slots_computed",
        date=day.isoformat(),
        timezone=draft.timezone,
        duration=draft.duration,
        found=len(slots),
    )
    return slots
