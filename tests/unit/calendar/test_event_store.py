"""Tests for vibecal/calendar/store.py

The event store is the command API for the calendar.
Key functionality:
- Validation runs before conflict detection
- Rejected commands leave the store unchanged
- Repeating events insert the whole series at once
- Edits keep the id and never conflict with themselves
"""

from datetime import time

import pytest

from vibecal.calendar.config_models import CalendarConfig
from vibecal.calendar.errors import InvalidTimezone, ValidationError
from vibecal.calendar.models import Event, EventStatus
from vibecal.calendar.store import EventStore


def at(time_str: str, **overrides) -> dict:
    draft = {"title": f"Event {time_str}", "date": "2024-01-01", "time": time_str}
    draft.update(overrides)
    return draft


# ─────────────────────────────────────────────────────────────────────────────
# Add
# ─────────────────────────────────────────────────────────────────────────────


class TestAddEvent:
    """Tests for adding events."""

    def test_adds_event(self, store, sample_event):
        result = store.add_event(sample_event)

        assert result["success"] is True
        assert result["data"]["event_ids"] == [result["data"]["event_id"]]
        assert result["data"]["event"]["title"] == "Design review"
        assert len(store) == 1

    def test_fills_defaults(self, store):
        result = store.add_event({"title": "Quick", "date": "2024-01-01", "time": "09:00"})
        event = result["data"]["event"]

        assert event["duration"] == 60
        assert event["buffer"] == 15
        assert event["timezone"] == "UTC"
        assert event["type"] == "meeting"
        assert event["status"] == "confirmed"

    def test_explicit_null_buffer_is_normalized(self, store):
        result = store.add_event(at("09:00", buffer=None))
        assert result["data"]["event"]["buffer"] == 15

    def test_assigns_fresh_id(self, store):
        result = store.add_event(at("09:00", id="chosen-by-caller"))
        assert result["data"]["event_id"] != "chosen-by-caller"

    def test_accepts_event_instance(self, store):
        event = Event.from_dict(at("09:00", title="Typed"))
        result = store.add_event(event)

        assert result["success"] is True
        assert result["data"]["event"]["title"] == "Typed"

    @pytest.mark.parametrize("missing", ["title", "date", "time"])
    def test_missing_required_field(self, store, missing):
        draft = at("09:00")
        draft[missing] = ""
        result = store.add_event(draft)

        assert result["success"] is False
        assert result["error_type"] == "validation"
        assert result["fields"] == [missing]

    @pytest.mark.parametrize("field,value", [("title", 123), ("title", 2024), ("location", ["Room 4"])])
    def test_non_text_field_rejected(self, store, field, value):
        """Non-string text fields come back as a validation result, not a crash."""
        result = store.add_event(at("10:00", **{field: value}))

        assert result["success"] is False
        assert result["error_type"] == "validation"
        assert result["fields"] == [field]
        assert len(store) == 0

    def test_non_text_title_on_edit_and_preview(self, store):
        event_id = store.add_event(at("10:00"))["data"]["event_id"]

        assert store.edit_event(event_id, at("10:00", title=7))["error_type"] == "validation"
        assert store.check_conflicts(at("10:00", title=7))["error_type"] == "validation"

    def test_single_attendee_string_kept_whole(self, store):
        result = store.add_event(at("10:00", attendees="alice@example.com"))
        assert result["data"]["event"]["attendees"] == ["alice@example.com"]

    def test_whitespace_title_is_missing(self, store):
        result = store.add_event(at("09:00", title="   "))
        assert result["fields"] == ["title"]

    def test_validation_before_conflict(self, store):
        """A draft missing its title is rejected as invalid even when it overlaps."""
        store.add_event(at("10:00"))
        result = store.add_event(at("10:00", title=""))

        assert result["error_type"] == "validation"

    @pytest.mark.parametrize(
        "field,value",
        [("duration", 0), ("duration", -30), ("buffer", -1), ("reminder", -5), ("duration", "long")],
    )
    def test_rejects_bad_values(self, store, field, value):
        result = store.add_event(at("09:00", **{field: value}))

        assert result["error_type"] == "validation"
        assert result["fields"] == [field]

    def test_rejects_malformed_date(self, store):
        result = store.add_event(at("09:00", date="01/02/2024"))
        assert result["fields"] == ["date"]

    def test_rejects_unknown_type(self, store):
        result = store.add_event(at("09:00", type="party"))
        assert result["fields"] == ["type"]

    def test_rejects_unknown_timezone(self, store):
        result = store.add_event(at("09:00", timezone="Atlantis/Capital"))

        assert result["success"] is False
        assert result["error_type"] == "invalid_timezone"

    def test_timezone_catalog(self, calendar_config):
        store = EventStore(config=calendar_config, timezones=["UTC", "Europe/Berlin"])

        assert store.add_event(at("09:00", timezone="Europe/Berlin"))["success"] is True
        assert store.add_event(at("12:00", timezone="Asia/Tokyo"))["error_type"] == "invalid_timezone"

    def test_conflict_rejected(self, store):
        store.add_event(at("10:00", title="E1"))
        result = store.add_event(at("11:00", duration=30))

        assert result["success"] is False
        assert result["error_type"] == "conflict"
        assert result["error"] == "Conflicts with: E1"
        assert [c["conflict_with"] for c in result["conflicts"]] == ["E1"]

    def test_start_at_buffer_end_accepted(self, store):
        store.add_event(at("10:00", title="E1"))
        assert store.add_event(at("11:15", duration=30))["success"] is True

    def test_rejection_leaves_store_unchanged(self, store):
        store.add_event(at("10:00", repeat="weekly"))
        before = store.snapshot()

        store.add_event(at("10:30", repeat="daily"))
        store.add_event(at("10:30", title=""))

        assert store.snapshot() == before

    def test_repeat_inserts_series(self, store):
        result = store.add_event(at("09:00", repeat="weekly"))
        ids = result["data"]["event_ids"]

        assert len(ids) == 6
        assert ids[0] == result["data"]["event_id"]
        assert len(store) == 6
        dates = [e.date.isoformat() for e in store.snapshot()]
        assert dates == ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22", "2024-01-29", "2024-02-05"]

    def test_series_members_not_conflict_checked(self, store):
        """Only the base is checked; later occurrences may overlap existing events."""
        store.add_event(at("09:00", date="2024-01-08", title="Blocker"))
        result = store.add_event(at("09:00", repeat="weekly"))

        assert result["success"] is True

    def test_occurrence_count_from_config(self):
        config = CalendarConfig.model_validate({"recurrence": {"occurrences": 2}})
        store = EventStore(config=config)

        assert len(store.add_event(at("09:00", repeat="daily"))["data"]["event_ids"]) == 3

    def test_callback_receives_base(self, calendar_config):
        added = []
        store = EventStore(config=calendar_config, on_event_added=added.append)
        result = store.add_event(at("09:00", repeat="daily"))

        assert len(added) == 1
        assert added[0].id == result["data"]["event_id"]

    def test_callback_not_called_on_rejection(self, calendar_config):
        added = []
        store = EventStore(config=calendar_config, on_event_added=added.append)
        store.add_event(at("09:00", title=""))

        assert added == []

    def test_callback_failure_does_not_undo_add(self, calendar_config):
        def broken(event):
            raise RuntimeError("listener down")

        store = EventStore(config=calendar_config, on_event_added=broken)
        result = store.add_event(at("09:00"))

        assert result["success"] is True
        assert len(store) == 1


# ─────────────────────────────────────────────────────────────────────────────
# Edit
# ─────────────────────────────────────────────────────────────────────────────


class TestEditEvent:
    """Tests for editing events."""

    def test_edit_in_place(self, store):
        first = store.add_event(at("09:00"))["data"]["event_id"]
        second = store.add_event(at("13:00"))["data"]["event_id"]

        result = store.edit_event(first, at("09:30", title="Moved"))

        assert result["success"] is True
        assert result["data"]["id"] == first
        assert [e.id for e in store.snapshot()] == [first, second]
        assert store.snapshot()[0].time == time(9, 30)

    def test_shift_does_not_conflict_with_itself(self, store):
        event_id = store.add_event(at("10:00"))["data"]["event_id"]
        assert store.edit_event(event_id, at("10:15"))["success"] is True

    def test_edit_conflicts_with_others(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]
        store.add_event(at("11:00", title="Other"))

        result = store.edit_event(event_id, at("10:30"))

        assert result["error_type"] == "conflict"
        assert store.snapshot()[0].time == time(9, 0)

    def test_edit_missing_id(self, store):
        result = store.edit_event("nope", at("09:00"))

        assert result["success"] is False
        assert result["error_type"] == "not_found"

    def test_edit_validates(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]
        result = store.edit_event(event_id, at("09:00", time=""))

        assert result["error_type"] == "validation"

    def test_edit_can_change_status(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]
        store.edit_event(event_id, at("09:00", status="pending"))

        assert store.snapshot()[0].status is EventStatus.PENDING

    def test_edit_does_not_expand_series(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]
        store.edit_event(event_id, at("09:00", repeat="daily"))

        assert len(store) == 1


# ─────────────────────────────────────────────────────────────────────────────
# Delete and Queries
# ─────────────────────────────────────────────────────────────────────────────


class TestDeleteAndQueries:
    """Tests for delete, get, list and previews."""

    def test_delete(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]

        assert store.delete_event(event_id)["success"] is True
        assert len(store) == 0

    def test_delete_missing(self, store):
        assert store.delete_event("nope")["error_type"] == "not_found"

    def test_delete_frees_slot(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]
        store.delete_event(event_id)

        assert store.add_event(at("09:00"))["success"] is True

    def test_get_event(self, store):
        event_id = store.add_event(at("09:00"))["data"]["event_id"]

        assert store.get_event(event_id)["data"]["id"] == event_id
        assert store.get_event("nope")["error_type"] == "not_found"

    def test_list_events(self, store):
        store.add_event(at("09:00"))
        store.add_event(at("13:00"))
        result = store.list_events()

        assert result["total"] == 2
        assert [e["time"] for e in result["data"]] == ["09:00", "13:00"]

    def test_list_events_location_kind(self, store):
        store.add_event(at("09:00", location="Zoom"))
        store.add_event(at("13:00", location="Room 4"))
        store.add_event(at("15:00"))

        kinds = [e["location_kind"] for e in store.list_events()["data"]]
        assert kinds == ["video", "physical", None]

    def test_check_conflicts_preview(self, store):
        store.add_event(at("10:00", title="E1"))
        before = store.snapshot()
        result = store.check_conflicts(at("10:30"))

        assert result["data"]["has_conflicts"] is True
        assert store.snapshot() == before

    def test_check_conflicts_excludes_edited(self, store):
        event_id = store.add_event(at("10:00"))["data"]["event_id"]
        result = store.check_conflicts(at("10:30"), exclude_id=event_id)

        assert result["data"]["conflicts"] == []

    def test_seed_events_skip_conflict_checks(self, calendar_config):
        store = EventStore(events=[at("09:00"), at("09:15")], config=calendar_config)
        assert len(store) == 2

    def test_seed_events_keep_their_ids(self, calendar_config):
        store = EventStore(events=[at("09:00", id="a"), at("13:00", id="b")], config=calendar_config)
        assert [e.id for e in store.snapshot()] == ["a", "b"]

    def test_seed_duplicate_ids_rejected(self, calendar_config):
        with pytest.raises(ValidationError) as exc_info:
            EventStore(events=[at("09:00", id="a"), at("13:00", id="a")], config=calendar_config)
        assert exc_info.value.fields == ["id"]


# ─────────────────────────────────────────────────────────────────────────────
# Availability
# ─────────────────────────────────────────────────────────────────────────────


class TestComputeAvailability:
    """Tests for the store's slot suggestion entry point."""

    def test_first_slot_after_morning_event(self, store):
        store.add_event(at("09:00"))
        slots = store.compute_availability("2024-01-01", {"duration": 60})

        assert slots[0] == time(10, 30)
        assert len(slots) <= 6

    def test_uses_configured_window(self):
        config = CalendarConfig.model_validate(
            {"work_window": {"start_hour": 13, "end_hour": 15}, "slots": {"max_slots": 10}}
        )
        store = EventStore(config=config)
        slots = store.compute_availability("2024-01-01", {"duration": 60})

        assert slots == [time(13, 0), time(13, 30), time(14, 0)]

    def test_missing_date_raises(self, store):
        with pytest.raises(ValidationError):
            store.compute_availability("", {"duration": 30})

    def test_invalid_zone_raises(self, store):
        with pytest.raises(InvalidTimezone):
            store.compute_availability("2024-01-01", {"timezone": "Mars/Base"})

    @pytest.mark.parametrize(
        "draft,field",
        [
            ({"duration": -60}, "duration"),
            ({"duration": 0, "buffer": 0}, "duration"),
            ({"duration": 30, "buffer": -5}, "buffer"),
        ],
    )
    def test_out_of_range_draft_raises(self, store, draft, field):
        """Impossible drafts are rejected rather than given slots."""
        with pytest.raises(ValidationError) as exc_info:
            store.compute_availability("2024-01-01", draft)
        assert exc_info.value.fields == [field]

    def test_draft_needs_no_title(self, store):
        assert store.compute_availability("2024-01-01", {"duration": 30})[0] == time(9, 0)

    def test_does_not_modify_store(self, store):
        store.add_event(at("09:00"))
        before = store.snapshot()
        store.compute_availability("2024-01-01", {"duration": 30})

        assert store.snapshot() == before
