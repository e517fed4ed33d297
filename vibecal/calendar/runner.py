"""
Tool: Reminder Runner
Purpose: Drive ReminderScheduler.tick() on a fixed interval

Runs as an asyncio task beside whatever else the host event loop does.
stop() cancels and awaits the task, so no sleeping timer outlives it.

Usage:
    runner = ReminderRunner(reminders, interval_seconds=30, on_notify=show)
    await runner.start()
    ...
    await runner.stop()

    # or
    async with ReminderRunner(reminders) as runner:
        ...
"""

import asyncio
import inspect
from collections.abc import Callable
from datetime import datetime
from typing import Any

from vibecal.calendar import REMINDER_POLL_SECONDS
from vibecal.calendar.models import ReminderNotification
from vibecal.calendar.reminders import ReminderScheduler
from vibecal.logging_config import get_logger

logger = get_logger(__name__)

NotifyCallback = Callable[[ReminderNotification], Any]


class ReminderRunner:
    """Periodic reminder evaluation loop with a start/stop lifecycle."""

    def __init__(
        self,
        scheduler: ReminderScheduler,
        interval_seconds: float = REMINDER_POLL_SECONDS,
        on_notify: NotifyCallback | None = None,
    ):
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self.on_notify = on_notify
        self.running = False
        self.start_time: datetime | None = None
        self.status = {"ticks": 0, "emitted": 0, "errors": 0, "last_run": None}
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self.running = True
        self.start_time = datetime.now()
        self._task = asyncio.create_task(self._run_loop(), name="vibecal-reminders")
        logger.info("reminder_runner_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        self.running = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("reminder_runner_stopped", **self.status)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> list[ReminderNotification]:
        """Evaluate one tick and deliver what it emits."""
        emitted = self.scheduler.tick()
        self.status["ticks"] += 1
        self.status["emitted"] += len(emitted)
        self.status["last_run"] = datetime.now().isoformat()

        if self.on_notify is not None:
            for notification in emitted:
                result = self.on_notify(notification)
                if inspect.isawaitable(result):
                    await result
        return emitted

    async def _run_loop(self) -> None:
        while self.running:
            try:
                await self.run_once()
            except Exception:
                self.status["errors"] += 1
                logger.exception("reminder_tick_failed")

            await asyncio.sleep(self.interval_seconds)

    async def __aenter__(self) -> "ReminderRunner":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
