from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from vibecal.calendar import (
    CONFIG_PATH,
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_EVENT_TYPES,
    DEFAULT_REMINDER_OPTIONS,
    DEFAULT_TIMEZONE,
    MAX_SLOTS,
    RECURRENCE_OCCURRENCES,
    REMINDER_POLL_SECONDS,
    SLOT_STEP_MINUTES,
    VIDEO_LOCATION_KEYWORDS,
    WORK_DAY_END_HOUR,
    WORK_DAY_START_HOUR,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CalendarConfig (args/calendar.yaml)
# =============================================================================

class WorkWindowConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    start_hour: int = Field(default=WORK_DAY_START_HOUR, ge=0, le=23)
    end_hour: int = Field(default=WORK_DAY_END_HOUR, ge=1, le=24)

    @model_validator(mode="after")
    def _check_order(self) -> "WorkWindowConfig":
        if self.end_hour <= self.start_hour:
            raise ValueError("work_window.end_hour must be after start_hour")
        return self


class SlotsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    step_minutes: int = Field(default=SLOT_STEP_MINUTES, ge=1)
    max_slots: int = Field(default=MAX_SLOTS, ge=1)


class RecurrenceConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    occurrences: int = Field(default=RECURRENCE_OCCURRENCES, ge=0)


class RemindersConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=True)
    poll_interval_seconds: float = Field(default=REMINDER_POLL_SECONDS, gt=0)


class EventDefaultsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    duration: int = Field(default=DEFAULT_DURATION_MINUTES, ge=1)
    buffer: int = Field(default=DEFAULT_BUFFER_MINUTES, ge=0)
    timezone: str = Field(default=DEFAULT_TIMEZONE)


class EventTypeOption(BaseModel):
    value: str
    label: str
    color: str = Field(default="")


class ReminderOption(BaseModel):
    value: int = Field(ge=0)
    label: str


class CalendarConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    work_window: WorkWindowConfig = Field(default_factory=WorkWindowConfig)
    slots: SlotsConfig = Field(default_factory=SlotsConfig)
    recurrence: RecurrenceConfig = Field(default_factory=RecurrenceConfig)
    reminders: RemindersConfig = Field(default_factory=RemindersConfig)
    defaults: EventDefaultsConfig = Field(default_factory=EventDefaultsConfig)
    event_types: list[EventTypeOption] = Field(
        default_factory=lambda: [EventTypeOption(**t) for t in DEFAULT_EVENT_TYPES]
    )
    reminder_options: list[ReminderOption] = Field(
        default_factory=lambda: [ReminderOption(**o) for o in DEFAULT_REMINDER_OPTIONS]
    )
    video_keywords: list[str] = Field(default_factory=lambda: list(VIDEO_LOCATION_KEYWORDS))

    @property
    def event_type_values(self) -> list[str]:
        return [t.value for t in self.event_types]

    def reminder_label(self, minutes: int) -> str:
        for option in self.reminder_options:
            if option.value == minutes:
                return option.label
        return f"{minutes} minutes before"


def load_config(path: Path | None = None) -> CalendarConfig:
    """Load args/calendar.yaml, falling back to defaults on any problem."""
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return CalendarConfig.model_validate(raw.get("calendar", raw))
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path}: {e}, using defaults")
        return CalendarConfig()
