# src/reminders/reminder_service.py

"""Purchase reminders: a calendar event followed by a notification."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Protocol

from src.config.settings import Settings
from src.models.reminder import CalendarEvent, ReminderReceipt

logger = logging.getLogger("catalog_browser.reminders")


class CalendarStore(Protocol):
    def create_event(self, event: CalendarEvent) -> str:
        ...

    def list_events(
        self, start: datetime, end: datetime,
    ) -> list[CalendarEvent]:
        ...

    def delete_event(self, event_id: str) -> None:
        ...


class Notifier(Protocol):
    def schedule(self, title: str, body: str, when: datetime) -> None:
        ...


class PurchaseReminderService:
    """Schedules purchase reminders through injected capabilities.

    The chain is sequential: when the calendar write fails nothing else
    happens; when the notification fails afterwards the calendar event
    is kept and the receipt reports a partial success.
    """

    def __init__(
        self,
        calendar: CalendarStore,
        notifier: Notifier | None = None,
    ) -> None:
        self.calendar = calendar
        self.notifier = notifier
        self.settings = Settings()

    def _title(self, product_title: str) -> str:
        return f"{self.settings.REMINDER_TITLE_PREFIX}: {product_title}"

    async def add_purchase_reminder(
        self,
        product_title: str,
        when: datetime | None = None,
    ) -> ReminderReceipt:
        """Create the calendar event, then arm the notification.

        Raises ReminderError (or ReminderPermissionError) when the
        calendar event cannot be created.
        """
        if when is None:
            when = datetime.now(timezone.utc) + timedelta(
                hours=self.settings.REMINDER_LEAD_HOURS
            )
        notes = f"Don't forget to purchase: {product_title}"
        event = CalendarEvent(
            title=self._title(product_title),
            start=when,
            end=when + timedelta(
                minutes=self.settings.REMINDER_DURATION_MINUTES
            ),
            notes=notes,
            location=self.settings.REMINDER_LOCATION,
        )

        event_id = await asyncio.to_thread(self.calendar.create_event, event)

        scheduled = False
        if self.notifier is not None:
            try:
                self.notifier.schedule(
                    self.settings.REMINDER_TITLE_PREFIX, notes, when
                )
                scheduled = True
            except Exception as exc:
                # Calendar event already exists; it is not rolled back
                logger.warning(
                    "Failed to schedule notification for event %s: %s",
                    event_id,
                    exc,
                    exc_info=True,
                )

        logger.info(
            "Purchase reminder for '%s' at %s (event=%s, notified=%s)",
            product_title,
            when.isoformat(),
            event_id,
            scheduled,
        )
        return ReminderReceipt(
            event_id=event_id, notification_scheduled=scheduled
        )

    async def upcoming_reminders(
        self, days: int | None = None,
    ) -> list[CalendarEvent]:
        """Return purchase reminders due within the next *days* days."""
        if days is None:
            days = self.settings.REMINDER_LOOKAHEAD_DAYS
        now = datetime.now(timezone.utc)
        try:
            events = await asyncio.to_thread(
                self.calendar.list_events, now, now + timedelta(days=days)
            )
        except Exception:
            logger.error("Failed to get upcoming reminders", exc_info=True)
            return []
        prefix = self.settings.REMINDER_TITLE_PREFIX
        return [e for e in events if prefix in e.title]

    async def remove_reminder(self, event_id: str) -> None:
        await asyncio.to_thread(self.calendar.delete_event, event_id)
        logger.info("Removed reminder %s", event_id)
