# src/models/reminder.py

"""Calendar reminder models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CalendarEvent:
    """A single calendar entry created for a purchase reminder."""

    title: str
    start: datetime
    end: datetime
    notes: str = ""
    location: str = ""
    event_id: str = ""


@dataclass(frozen=True)
class ReminderReceipt:
    """Result of scheduling a reminder.

    ``notification_scheduled`` is ``False`` when the calendar event was
    written but the follow-up notification could not be armed.
    """

    event_id: str
    notification_scheduled: bool


@dataclass(frozen=True)
class ReminderOutcome:
    """User-facing result of a reminder request."""

    success: bool
    message: str
    partial: bool = False
    event_id: str | None = None
