"""
Tool: Time Converter
Purpose: Resolve wall-clock (date, time, timezone) triples to absolute instants

Instants are timezone-aware datetimes normalised to UTC. Arithmetic on them
is exact elapsed time, so DST transitions never stretch or shrink an event.

Usage:
    from vibecal.calendar.timeconv import resolve_instant

    resolve_instant(date(2024, 3, 31), time(9, 0), "Europe/Berlin")
    # datetime(2024, 3, 31, 7, 0, tzinfo=timezone.utc)

Wall-clock times that fall in a DST gap or repeated hour resolve with
fold=0, i.e. using the offset in effect before the transition.
"""

from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from vibecal.calendar.errors import InvalidTimezone
from vibecal.calendar.models import Event


@lru_cache(maxsize=256)
def get_zone(name: str) -> ZoneInfo:
    """
    Look up a zone by IANA identifier.

    Raises:
        InvalidTimezone: if the identifier is empty, malformed or unknown
    """
    if not name:
        raise InvalidTimezone(name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidTimezone(name) from None


def resolve_instant(day: date, wall_time: time, tz_name: str) -> datetime:
    """
    Resolve a wall-clock time on a calendar date in a zone to a UTC instant.

    The zone's offset for that specific date is used, not a fixed offset.

    Raises:
        InvalidTimezone: if tz_name is not a recognised zone
    """
    zone = get_zone(tz_name)
    local = datetime.combine(day, wall_time.replace(tzinfo=None), tzinfo=zone)
    return local.astimezone(timezone.utc)


def to_local(instant: datetime, tz_name: str) -> datetime:
    """Convert an instant to wall-clock time in the given zone."""
    return instant.astimezone(get_zone(tz_name))


def event_start(event: Event) -> datetime:
    return resolve_instant(event.date, event.time, event.timezone)


def event_end(event: Event) -> datetime:
    """Nominal end: start + duration."""
    return event_start(event) + timedelta(minutes=event.duration)


def conflict_window(event: Event) -> tuple[datetime, datetime]:
    """Half-open [start, start + duration + buffer) window used for overlap tests."""
    start = event_start(event)
    return start, start + timedelta(minutes=event.duration + event.effective_buffer)
