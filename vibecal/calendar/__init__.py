"""Calendar Engine - conflict-aware scheduling for a single timeline

Components:
    models.py: Event and ReminderNotification data structures
    timeconv.py: (date, time, timezone) -> absolute instant resolution
    conflicts.py: Buffer-aware overlap detection
    availability.py: Greedy free-slot search inside the work window
    recurrence.py: Daily/weekly/monthly series expansion
    reminders.py: Reminder evaluation and the notification list
    runner.py: Periodic asyncio driver for reminder ticks
    store.py: EventStore command/query API
    queries.py: Day/range listings and dashboard counters
    config_models.py: args/calendar.yaml schema

Usage:
    from vibecal.calendar.store import EventStore
    from vibecal.calendar.reminders import ReminderScheduler

    store = EventStore()
    result = store.add_event({
        "title": "Design review",
        "date": "2024-01-01",
        "time": "10:00",
        "timezone": "Europe/Berlin",
        "repeat": "weekly",
    })
    slots = store.compute_availability("2024-01-01", {"duration": 30})
    reminders = ReminderScheduler(store)
"""

from vibecal import ARGS_DIR

CONFIG_PATH = ARGS_DIR / "calendar.yaml"

# Scheduling defaults
DEFAULT_BUFFER_MINUTES = 15
DEFAULT_DURATION_MINUTES = 60
DEFAULT_TIMEZONE = "UTC"
WORK_DAY_START_HOUR = 9
WORK_DAY_END_HOUR = 17
SLOT_STEP_MINUTES = 30
MAX_SLOTS = 6
RECURRENCE_OCCURRENCES = 5
REMINDER_POLL_SECONDS = 30

# Valid values
REPEAT_OPTIONS = ("none", "daily", "weekly", "monthly")

# Substrings marking a location as a video call
VIDEO_LOCATION_KEYWORDS = ("Zoom", "Meet")

DEFAULT_EVENT_TYPES = (
    {"value": "meeting", "label": "Meeting", "color": "bg-blue-500"},
    {"value": "call", "label": "Call", "color": "bg-green-500"},
    {"value": "review", "label": "Review", "color": "bg-purple-500"},
    {"value": "focus", "label": "Focus", "color": "bg-orange-500"},
    {"value": "break", "label": "Break", "color": "bg-gray-500"},
)

DEFAULT_REMINDER_OPTIONS = (
    {"value": 0, "label": "No reminder"},
    {"value": 5, "label": "5 minutes before"},
    {"value": 10, "label": "10 minutes before"},
    {"value": 30, "label": "30 minutes before"},
    {"value": 60, "label": "1 hour before"},
)

__all__ = [
    "CONFIG_PATH",
    "DEFAULT_BUFFER_MINUTES",
    "DEFAULT_DURATION_MINUTES",
    "DEFAULT_TIMEZONE",
    "WORK_DAY_START_HOUR",
    "WORK_DAY_END_HOUR",
    "SLOT_STEP_MINUTES",
    "MAX_SLOTS",
    "RECURRENCE_OCCURRENCES",
    "REMINDER_POLL_SECONDS",
    "REPEAT_OPTIONS",
    "VIDEO_LOCATION_KEYWORDS",
    "DEFAULT_EVENT_TYPES",
    "DEFAULT_REMINDER_OPTIONS",
]
