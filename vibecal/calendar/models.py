"""
Tool: Calendar Models
Purpose: Data structures for calendar events and reminder notifications

Usage:
    from vibecal.calendar.models import Event, Repeat, EventStatus

    event = Event.from_dict({"title": "Standup", "date": "2024-01-01", "time": "10:00"})
    event.to_dict()

Events are immutable values. The store replaces them wholesale on edit,
so every change goes through dataclasses.replace().
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from vibecal.calendar import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_TIMEZONE,
    VIDEO_LOCATION_KEYWORDS,
)
from vibecal.calendar.errors import ValidationError


class Repeat(str, Enum):
    """Recurrence frequency."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EventStatus(str, Enum):
    """Event confirmation status."""

    CONFIRMED = "confirmed"
    PENDING = "pending"


@dataclass(frozen=True)
class Event:
    """
    A calendar event on a single timeline.

    ``id`` is None for drafts and assigned by the store on insert.
    ``date`` and ``time`` are wall-clock values in ``timezone``.
    """

    title: str = ""
    date: date | None = None
    time: time | None = None
    duration: int = DEFAULT_DURATION_MINUTES
    timezone: str = DEFAULT_TIMEZONE
    type: str = "meeting"
    attendees: tuple[str, ...] = ()
    location: str = ""
    buffer: int | None = DEFAULT_BUFFER_MINUTES
    description: str = ""
    repeat: Repeat = Repeat.NONE
    reminder: int = 0
    status: EventStatus = EventStatus.CONFIRMED
    id: str | None = None

    @property
    def effective_buffer(self) -> int:
        """Buffer minutes with the default applied."""
        return DEFAULT_BUFFER_MINUTES if self.buffer is None else self.buffer

    def location_kind(self, keywords: Iterable[str] = VIDEO_LOCATION_KEYWORDS) -> str | None:
        """Classify the location as 'video', 'physical', or None when empty."""
        if not self.location:
            return None
        if any(keyword in self.location for keyword in keywords):
            return "video"
        return "physical"

    def with_id(self, event_id: str) -> "Event":
        return replace(self, id=event_id)

    def normalized(self) -> "Event":
        """Return a copy with the default buffer made explicit."""
        if self.buffer is None:
            return replace(self, buffer=DEFAULT_BUFFER_MINUTES)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time.strftime("%H:%M") if self.time else None,
            "duration": self.duration,
            "timezone": self.timezone,
            "type": self.type,
            "attendees": list(self.attendees),
            "location": self.location,
            "buffer": self.buffer,
            "description": self.description,
            "repeat": self.repeat.value,
            "reminder": self.reminder,
            "status": self.status.value,
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        """
        Create from a dict as produced by to_dict() or typed by a user.

        Unknown keys are ignored. Malformed values raise ValidationError.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        if "date" in values:
            values["date"] = parse_date(values["date"])
        if "time" in values:
            values["time"] = _parse_time(values["time"])
        if isinstance(values.get("attendees"), str):
            values["attendees"] = (values["attendees"],)
        elif values.get("attendees") is not None:
            values["attendees"] = tuple(values["attendees"])
        else:
            values.pop("attendees", None)
        for key in ("duration", "reminder"):
            if key in values:
                values[key] = _parse_int(key, values[key])
        if values.get("buffer") is not None:
            values["buffer"] = _parse_int("buffer", values["buffer"])
        if "repeat" in values:
            values["repeat"] = _parse_enum(Repeat, "repeat", values["repeat"])
        if "status" in values:
            values["status"] = _parse_enum(EventStatus, "status", values["status"])
        if values.get("id") is not None:
            values["id"] = str(values["id"])

        for key in ("title", "location", "description", "timezone", "type"):
            if values.get(key) is None:
                values.pop(key, None)
            elif not isinstance(values[key], str):
                raise ValidationError(f"Invalid {key}: {values[key]!r} (expected text)", [key])

        return cls(**values)

    @staticmethod
    def generate_id() -> str:
        """Generate a new internal ID."""
        return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class ReminderNotification:
    """
    An in-app reminder that an event is about to start.

    Identity is the (event_id, remind_at) pair; see ``key``.
    """

    event_id: str
    remind_at: datetime
    text: str
    event: Event = field(compare=False)

    @property
    def key(self) -> tuple[str, datetime]:
        return (self.event_id, self.remind_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "remind_at": self.remind_at.isoformat(),
            "text": self.text,
            "event": self.event.to_dict(),
        }


def coerce_event(draft: "Event | Mapping[str, Any]") -> Event:
    """Accept an Event or a plain mapping and return an Event."""
    if isinstance(draft, Event):
        return draft
    return Event.from_dict(draft)


def validate_event(event: Event, event_types: Iterable[str] | None = None) -> None:
    """
    Check required fields, then value ranges.

    Raises:
        ValidationError: listing the offending field names
    """
    missing = []
    if not isinstance(event.title, str) or not event.title.strip():
        missing.append("title")
    if event.date is None:
        missing.append("date")
    if event.time is None:
        missing.append("time")
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing)

    validate_ranges(event)

    if event_types is not None:
        allowed = tuple(event_types)
        if allowed and event.type not in allowed:
            raise ValidationError(
                f"Invalid event type. Must be one of: {allowed}", ["type"]
            )


def validate_ranges(event: Event) -> None:
    """Check duration, buffer and reminder without requiring title/date/time."""
    if event.duration <= 0:
        raise ValidationError("Duration must be a positive number of minutes", ["duration"])
    if event.buffer is not None and event.buffer < 0:
        raise ValidationError("Buffer cannot be negative", ["buffer"])
    if event.reminder < 0:
        raise ValidationError("Reminder cannot be negative", ["reminder"])


def parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)", ["date"])


def _parse_time(value: Any) -> time | None:
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid time: {value!r} (expected HH:MM)", ["time"])


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}: {value!r}", [name])


def _parse_enum(enum_cls: type[Enum], name: str, value: Any) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = tuple(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {name}. Must be one of: {allowed}", [name])
