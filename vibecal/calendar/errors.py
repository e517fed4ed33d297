"""
Calendar engine errors.

Engine functions raise these; EventStore converts them into result dicts
with ``error_type`` set to the exception's ``kind``.
"""

from typing import Any


class CalendarError(Exception):
    """Base class for calendar engine errors."""

    kind = "calendar"

    def to_result(self) -> dict[str, Any]:
        return {"success": False, "error": str(self), "error_type": self.kind}


class ValidationError(CalendarError):
    """A required field is missing or a field holds an invalid value."""

    kind = "validation"

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []

    def to_result(self) -> dict[str, Any]:
        result = super().to_result()
        result["fields"] = list(self.fields)
        return result


class ConflictError(CalendarError):
    """The candidate's conflict window overlaps existing events."""

    kind = "conflict"

    def __init__(self, conflicts: list[dict[str, Any]]):
        titles = ", ".join(c["conflict_with"] for c in conflicts)
        super().__init__(f"Conflicts with: {titles}")
        self.conflicts = conflicts

    def to_result(self) -> dict[str, Any]:
        result = super().to_result()
        result["conflicts"] = list(self.conflicts)
        return result


class InvalidTimezone(CalendarError, ValueError):
    """The timezone identifier is not in the zone database or catalog."""

    kind = "invalid_timezone"

    def __init__(self, timezone: str):
        super().__init__(f"Unknown timezone: {timezone!r}")
        self.timezone = timezone


class NotFoundError(CalendarError, LookupError):
    """No event with the given id exists in the store."""

    kind = "not_found"

    def __init__(self, event_id: str):
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id
