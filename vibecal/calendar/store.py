"""
Tool: Event Store
Purpose: Keyed event collection with the add/edit/delete command API

Every command validates and computes first, then commits under one lock,
so a rejected command leaves the store exactly as it was. Readers take
snapshots under the same lock and never see a half-applied change.

Commands return result dicts:
    {"success": True, "data": {...}, "message": "..."}
    {"success": False, "error": "...", "error_type": "validation" | "conflict"
                                                     | "invalid_timezone" | "not_found"}

Usage:
    from vibecal.calendar.store import EventStore

    store = EventStore(on_event_added=lambda e: print("added", e.title))
    result = store.add_event({"title": "1:1", "date": "2024-01-01", "time": "10:00"})
    store.edit_event(result["data"]["event_id"], {..., "time": "11:00"})
    store.compute_availability("2024-01-01", {"duration": 30})
"""

import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import date, time
from typing import Any

from vibecal.calendar.availability import find_slots
from vibecal.calendar.config_models import CalendarConfig, load_config
from vibecal.calendar.conflicts import find_conflicts
from vibecal.calendar.errors import (
    CalendarError,
    ConflictError,
    InvalidTimezone,
    NotFoundError,
    ValidationError,
)
from vibecal.calendar.models import (
    Event,
    coerce_event,
    parse_date,
    validate_event,
    validate_ranges,
)
from vibecal.calendar.recurrence import expand
from vibecal.calendar.timeconv import get_zone
from vibecal.logging_config import get_logger

logger = get_logger(__name__)

Draft = Event | Mapping[str, Any]


class EventStore:
    """Single-timeline event collection.

    Args:
        events: Initial events, inserted without conflict checks.
            Raises ValidationError if one is invalid or two share an id.
        config: Calendar settings; loaded from args/calendar.yaml when omitted.
        timezones: Zone catalog offered to users. When given, zones outside it
            are rejected even if the zone database knows them.
        on_event_added: Called with the base occurrence after a successful add.
    """

    def __init__(
        self,
        events: Iterable[Draft] | None = None,
        config: CalendarConfig | None = None,
        timezones: Iterable[str] | None = None,
        on_event_added: Callable[[Event], Any] | None = None,
    ):
        self.config = config or load_config()
        self.timezones = frozenset(timezones) if timezones is not None else None
        self.on_event_added = on_event_added
        self._events: dict[str, Event] = {}
        self._lock = threading.RLock()

        for draft in events or ():
            event = self._prepare(draft)
            event_id = event.id or Event.generate_id()
            if event_id in self._events:
                raise ValidationError(f"Duplicate event id: {event_id}", ["id"])
            self._events[event_id] = event.with_id(event_id)

    # ─────────────────────────────────────────────────────────────────────
    # Draft preparation
    # ─────────────────────────────────────────────────────────────────────

    def _coerce(self, draft: Draft) -> Event:
        """Build an Event, filling omitted fields from configured defaults."""
        if isinstance(draft, Event):
            return draft
        defaults = self.config.defaults
        values = {
            "duration": defaults.duration,
            "buffer": defaults.buffer,
            "timezone": defaults.timezone,
        }
        if self.config.event_types:
            values["type"] = self.config.event_types[0].value
        values.update(draft)
        return coerce_event(values)

    def _check_timezone(self, tz_name: str) -> None:
        if self.timezones is not None and tz_name not in self.timezones:
            raise InvalidTimezone(tz_name)
        get_zone(tz_name)

    def _prepare(self, draft: Draft) -> Event:
        """Coerce, validate required fields and values, then normalise."""
        event = self._coerce(draft)
        validate_event(event, self.config.event_type_values)
        self._check_timezone(event.timezone)
        return event.normalized()

    # ─────────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────────

    def add_event(self, draft: Draft) -> dict[str, Any]:
        """
        Validate, conflict-check and insert an event (and its recurrence series).

        Only the base occurrence is conflict-checked; generated occurrences
        are inserted without checks.

        Returns:
            dict with event_id (base), event_ids (base + series) and the base event
        """
        try:
            with self._lock:
                base = self._prepare(draft).with_id(Event.generate_id())
                conflicts = find_conflicts(base, self._events.values())
                if conflicts:
                    raise ConflictError(conflicts)

                series = [base] + expand(
                    base, base.repeat, count=self.config.recurrence.occurrences
                )
                for occurrence in series:
                    self._events[occurrence.id] = occurrence
        except CalendarError as e:
            logger.info("event_rejected", action="add", error_type=e.kind, error=str(e))
            return e.to_result()

        event_ids = [occurrence.id for occurrence in series]
        logger.info(
            "event_added",
            event_id=base.id,
            title=base.title,
            repeat=base.repeat.value,
            occurrences=len(event_ids),
        )

        if self.on_event_added is not None:
            try:
                self.on_event_added(base)
            except Exception:
                logger.exception("on_event_added_failed", event_id=base.id)

        return {
            "success": True,
            "data": {
                "event_id": base.id,
                "event_ids": event_ids,
                "event": base.to_dict(),
            },
            "message": f"Added {len(event_ids)} event(s)",
        }

    def edit_event(self, event_id: str, draft: Draft) -> dict[str, Any]:
        """Replace an event in place, keeping its id and position."""
        try:
            with self._lock:
                if event_id not in self._events:
                    raise NotFoundError(event_id)

                updated = self._prepare(draft).with_id(event_id)
                conflicts = find_conflicts(
                    updated, self._events.values(), exclude_id=event_id
                )
                if conflicts:
                    raise ConflictError(conflicts)

                self._events[event_id] = updated
        except CalendarError as e:
            logger.info(
                "event_rejected", action="edit", event_id=event_id, error_type=e.kind, error=str(e)
            )
            return e.to_result()

        logger.info("event_updated", event_id=event_id, title=updated.title)
        return {
            "success": True,
            "data": updated.to_dict(),
            "message": f"Event {event_id} updated",
        }

    def delete_event(self, event_id: str) -> dict[str, Any]:
        """Remove an event. Reminders already fired for it are left in place."""
        with self._lock:
            removed = self._events.pop(event_id, None)

        if removed is None:
            return NotFoundError(event_id).to_result()

        logger.info("event_deleted", event_id=event_id, title=removed.title)
        return {"success": True, "message": f"Event {event_id} deleted"}

    # ─────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────

    def get_event(self, event_id: str) -> dict[str, Any]:
        with self._lock:
            event = self._events.get(event_id)
        if event is None:
            return NotFoundError(event_id).to_result()
        return {"success": True, "data": event.to_dict()}

    def list_events(self) -> dict[str, Any]:
        """All events in insertion order, each tagged with its location kind."""
        events = self.snapshot()
        keywords = self.config.video_keywords
        return {
            "success": True,
            "data": [
                {**event.to_dict(), "location_kind": event.location_kind(keywords)}
                for event in events
            ],
            "total": len(events),
        }

    def snapshot(self) -> tuple[Event, ...]:
        """Consistent copy of all events, in insertion order."""
        with self._lock:
            return tuple(self._events.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def check_conflicts(self, draft: Draft, exclude_id: str | None = None) -> dict[str, Any]:
        """Preview the add/edit gate without changing anything."""
        try:
            event = self._prepare(draft)
            conflicts = find_conflicts(event, self.snapshot(), exclude_id=exclude_id)
        except CalendarError as e:
            return e.to_result()

        return {
            "success": True,
            "data": {"conflicts": conflicts, "has_conflicts": bool(conflicts)},
        }

    def compute_availability(self, day: date | str, draft: Draft) -> list[time]:
        """
        Suggest free start times on a date for the draft's duration and buffer.

        Raises:
            ValidationError: if day or a draft field is malformed, or the
                duration, buffer or reminder is out of range
            InvalidTimezone: if the draft's timezone is not recognised
        """
        day = parse_date(day)
        if day is None:
            raise ValidationError("Missing required fields: date", ["date"])
        event = self._coerce(draft)
        validate_ranges(event)
        event = event.normalized()
        self._check_timezone(event.timezone)

        settings = self.config
        return find_slots(
            day,
            event,
            self.snapshot(),
            start_hour=settings.work_window.start_hour,
            end_hour=settings.work_window.end_hour,
            step_minutes=settings.slots.step_minutes,
            max_slots=settings.slots.max_slots,
        )
