"""vibecal - calendar scheduling engine

Components:
    calendar/: Conflict detection, availability search, recurrence and reminders
    logging_config.py: structlog setup shared by every module
    cli.py: `vibecal` command line entry point

Usage:
    from vibecal.calendar.store import EventStore

    store = EventStore()
    store.add_event({"title": "Standup", "date": "2024-01-01", "time": "10:00"})
"""

from pathlib import Path

__version__ = "0.3.0"

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"

__all__ = [
    "__version__",
    "PROJECT_ROOT",
    "ARGS_DIR",
]
