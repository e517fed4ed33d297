"""Shared test fixtures for vibecal tests.

This module provides common fixtures used across all test modules:
- Default calendar configuration (no args/ file involved)
- Fresh event stores
- Standard event drafts

Usage:
    def test_something(store, sample_event):
        result = store.add_event(sample_event)
        ...
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from vibecal.calendar.config_models import CalendarConfig, load_config
from vibecal.calendar.store import EventStore


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"


# ─────────────────────────────────────────────────────────────────────────────
# Configuration Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def calendar_config() -> CalendarConfig:
    """Built-in defaults, independent of args/calendar.yaml."""
    return CalendarConfig()


@pytest.fixture
def shipped_config() -> CalendarConfig:
    """The args/calendar.yaml shipped with the project."""
    return load_config(ARGS_DIR / "calendar.yaml")


@pytest.fixture
def store(calendar_config) -> EventStore:
    """Empty event store using default configuration."""
    return EventStore(config=calendar_config)


# ─────────────────────────────────────────────────────────────────────────────
# Event Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_event() -> dict:
    """A 10:00-11:00 UTC meeting on 2024-01-01 with the default buffer."""
    return {
        "title": "Design review",
        "date": "2024-01-01",
        "time": "10:00",
        "duration": 60,
        "timezone": "UTC",
        "type": "meeting",
        "attendees": ["ana@example.com", "li@example.com"],
        "location": "Zoom",
    }


@pytest.fixture
def fixed_now() -> datetime:
    """2024-01-01 09:45 UTC."""
    return datetime(2024, 1, 1, 9, 45, tzinfo=timezone.utc)
