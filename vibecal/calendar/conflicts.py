"""
Tool: Conflict Detector
Purpose: Find existing events whose conflict window overlaps a candidate's

Each event occupies [start, start + duration + buffer). Windows are
half-open, so an event ending (buffer included) exactly when another
starts is not a conflict.

Usage:
    from vibecal.calendar.conflicts import find_conflicts

    conflicts = find_conflicts(draft, store.snapshot(), exclude_id=editing_id)
    if conflicts:
        print([c["conflict_with"] for c in conflicts])
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from vibecal.calendar.models import Event
from vibecal.calendar.timeconv import conflict_window


def windows_overlap(
    a: tuple[datetime, datetime],
    b: tuple[datetime, datetime],
) -> bool:
    """Half-open interval intersection test."""
    return a[0] < b[1] and a[1] > b[0]


def find_conflicts(
    candidate: Event,
    existing: Iterable[Event],
    exclude_id: str | None = None,
) -> list[dict[str, Any]]:
    """
    Report every existing event that overlaps the candidate.

    Args:
        candidate: Event being added or edited
        existing: Events to test against, in display order
        exclude_id: Event id to skip (the event being edited)

    Returns:
        [{"conflict_with": title, "event_id": id}, ...] in the iteration
        order of ``existing``; empty when the candidate is acceptable.

    Raises:
        InvalidTimezone: if the candidate or an existing event has an
            unrecognised zone
    """
    window = conflict_window(candidate)
    conflicts = []

    for other in existing:
        if other.id is not None and other.id in (exclude_id, candidate.id):
            continue
        if windows_overlap(window, conflict_window(other)):
            conflicts.append({"conflict_with": other.title, "event_id": other.id})

    return conflicts
