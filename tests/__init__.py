"""vibecal Test Suite

Test organization:
- unit/calendar/: Unit tests for the calendar engine modules
  (timeconv, conflicts, availability, recurrence, reminders, runner, store)
- integration/: End-to-end scheduling, reminder and CLI flows

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/calendar/test_conflicts.py
"""
