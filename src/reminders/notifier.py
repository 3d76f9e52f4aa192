# src/reminders/notifier.py

"""Event-loop timers that deliver reminder notifications."""

import asyncio
import itertools
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from src.reminders.errors import ReminderError

logger = logging.getLogger("catalog_browser.reminders")

Deliver = Callable[[str, str], None]


class ScheduledNotifier:
    """Calls ``deliver(title, body)`` when a reminder comes due.

    Timers live on the running event loop, so they only fire while the
    application is open.  The calendar event is the durable record.
    """

    def __init__(self, deliver: Deliver) -> None:
        self._deliver = deliver
        self._handles: dict[int, asyncio.TimerHandle] = {}
        self._tokens = itertools.count(1)

    @property
    def pending(self) -> int:
        return len(self._handles)

    def schedule(self, title: str, body: str, when: datetime) -> None:
        """Arm a timer for *when*; past times raise ReminderError."""
        if when.tzinfo is None:
            when = when.astimezone()
        delay = (when - datetime.now(timezone.utc)).total_seconds()
        if delay < 0:
            raise ReminderError("Reminder time is in the past")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise ReminderError(
                "No running event loop for notifications"
            ) from exc

        token = next(self._tokens)
        self._handles[token] = loop.call_later(
            delay, self._fire, token, title, body
        )
        logger.info("Notification '%s' scheduled in %.0fs", title, delay)

    def _fire(self, token: int, title: str, body: str) -> None:
        self._handles.pop(token, None)
        try:
            self._deliver(title, body)
        except Exception:
            logger.error(
                "Failed to deliver notification '%s'", title, exc_info=True
            )

    def cancel_all(self) -> int:
        """Cancel every pending timer; returns how many were cancelled."""
        count = len(self._handles)
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        return count
