"""
Tool: Reminder Scheduler
Purpose: Emit deduplicated in-app reminders ahead of event start

For each event with a reminder set, remind_at = start - reminder minutes.
A notification is emitted once "now" enters [remind_at, start) and stays
in the list until dismissed by its exact (event_id, remind_at) key.

Notifications are never retracted automatically. If an event is edited so
that its remind_at moves, or deleted, an already-fired notification for the
old key remains until the user dismisses it.

Usage:
    from vibecal.calendar.reminders import ReminderScheduler

    reminders = ReminderScheduler(store)
    for notification in reminders.tick():
        print(notification.text)
    reminders.dismiss(notification.event_id, notification.remind_at)
"""

import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from vibecal.calendar.errors import InvalidTimezone
from vibecal.calendar.models import Event, ReminderNotification
from vibecal.calendar.timeconv import event_start
from vibecal.logging_config import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_reminder(event: Event) -> str:
    return (
        f'Reminder: "{event.title}" at {event.time.strftime("%H:%M")} '
        f"({event.date.isoformat()}) in {event.reminder} min"
    )


def due_reminders(
    now: datetime,
    events: Iterable[Event],
    fired: Iterable[ReminderNotification],
) -> list[ReminderNotification]:
    """
    Evaluate reminder thresholds for one tick.

    Args:
        now: Current instant (timezone-aware)
        events: Events to evaluate
        fired: Notifications already in the list

    Returns:
        Notifications that became due and are not yet in ``fired``
    """
    seen = {n.key for n in fired}
    emitted = []

    for event in events:
        if event.reminder <= 0:
            continue

        try:
            start = event_start(event)
        except InvalidTimezone:
            logger.warning("reminder_skipped", event_id=event.id, timezone=event.timezone)
            continue

        threshold = start - timedelta(minutes=event.reminder)
        key = (event.id, threshold)
        if threshold <= now < start and key not in seen:
            seen.add(key)
            emitted.append(
                ReminderNotification(
                    event_id=event.id,
                    remind_at=threshold,
                    text=format_reminder(event),
                    event=event,
                )
            )

    return emitted


class ReminderScheduler:
    """Owns the notification list and evaluates the store on each tick.

    Args:
        store: Anything with a ``snapshot()`` returning the current events.
        clock: Returns the current instant; defaults to UTC wall clock.
    """

    def __init__(self, store, clock: Callable[[], datetime] | None = None):
        self.store = store
        self.clock = clock or utc_now
        self._notifications: list[ReminderNotification] = []
        self._lock = threading.Lock()

    @property
    def notifications(self) -> list[ReminderNotification]:
        """Current notifications, oldest first."""
        with self._lock:
            return list(self._notifications)

    def tick(self, now: datetime | None = None) -> list[ReminderNotification]:
        """Append and return the notifications that became due at ``now``."""
        if now is None:
            now = self.clock()
        events = self.store.snapshot()

        with self._lock:
            emitted = due_reminders(now, events, self._notifications)
            self._notifications.extend(emitted)

        for notification in emitted:
            logger.info(
                "reminder_emitted",
                event_id=notification.event_id,
                remind_at=notification.remind_at.isoformat(),
            )
        return emitted

    def dismiss(self, event_id: str, remind_at: datetime) -> bool:
        """Remove the notification with this exact key. Returns True if one was removed."""
        with self._lock:
            before = len(self._notifications)
            self._notifications = [
                n for n in self._notifications if n.key != (event_id, remind_at)
            ]
            removed = len(self._notifications) < before

        if removed:
            logger.info("reminder_dismissed", event_id=event_id, remind_at=remind_at.isoformat())
        return removed
