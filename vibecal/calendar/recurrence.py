"""
Tool: Recurrence Expander
Purpose: Derive the bounded series of future occurrences for a repeating event

Occurrence i (1-based) lands on the base start plus i days, weeks or
months. Month steps use calendar arithmetic, so Jan 31 + 1 month is the
last day of February. Occurrences keep the base's wall-clock time and every
other field; only date and id differ.

Only the base event is conflict-checked when a series is added. The
generated occurrences are inserted as-is.

Usage:
    from vibecal.calendar.recurrence import expand

    occurrences = expand(base_event, "weekly")
    len(occurrences)  # 5
"""

from dataclasses import replace

from dateutil.relativedelta import relativedelta

from vibecal.calendar import RECURRENCE_OCCURRENCES
from vibecal.calendar.models import Event, Repeat
from vibecal.calendar.timeconv import event_start, to_local

_STEPS = {
    Repeat.DAILY: lambda i: relativedelta(days=i),
    Repeat.WEEKLY: lambda i: relativedelta(weeks=i),
    Repeat.MONTHLY: lambda i: relativedelta(months=i),
}


def expand(
    base: Event,
    frequency: Repeat | str,
    count: int = RECURRENCE_OCCURRENCES,
) -> list[Event]:
    """
    Build the occurrences that follow a base event.

    Args:
        base: The first event of the series
        frequency: none, daily, weekly or monthly
        count: Occurrences to generate after the base

    Returns:
        [] for ``none``, otherwise ``count`` events with fresh ids, in date order

    Raises:
        InvalidTimezone: if the base event's timezone is not recognised
    """
    frequency = Repeat(frequency)
    if frequency is Repeat.NONE:
        return []

    step = _STEPS[frequency]
    local_start = to_local(event_start(base), base.timezone)

    occurrences = []
    for i in range(1, count + 1):
        next_start = local_start + step(i)
        occurrences.append(
            replace(base, id=Event.generate_id(), date=next_start.date())
        )

    return occurrences
