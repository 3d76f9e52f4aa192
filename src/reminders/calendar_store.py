# src/reminders/calendar_store.py

"""iCalendar-file backed calendar for purchase reminders.

Each event is written as a standalone ``{event_id}.ics`` file in the
reminders directory so that it can be imported into any desktop or
mobile calendar application. Content lines are folded at 75 octets on
write and unfolded on read.
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

from src.config.settings import Settings
from src.models.reminder import CalendarEvent
from src.reminders.errors import ReminderError, ReminderPermissionError

logger = logging.getLogger("catalog_browser.reminders")

_ICS_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
# Content lines longer than this many octets are folded
_FOLD_OCTETS = 75


def _escape(text: str) -> str:
    """Escape a TEXT value per RFC 5545 section 3.3.11."""
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace("\n", "\\n")
    )


def _fold(line: str) -> str:
    """Fold a content line into CRLF + space continuations (section 3.1).

    Splits on character boundaries so multi-byte UTF-8 sequences stay
    whole.
    """
    parts: list[str] = []
    current = ""
    size = 0
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > _FOLD_OCTETS:
            parts.append(current)
            current, size = " ", 1
        current += ch
        size += width
    parts.append(current)
    return "\r\n".join(parts)


def _unfold(content: str) -> list[str]:
    """Join folded continuation lines back into logical lines."""
    logical: list[str] = []
    for line in content.replace("\r\n", "\n").split("\n"):
        if line[:1] in (" ", "\t") and logical:
            logical[-1] += line[1:]
        else:
            logical.append(line)
    return logical


def _unescape(text: str) -> str:
    result: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            result.append(ch)
            continue
        nxt = next(chars, "")
        result.append("\n" if nxt in ("n", "N") else nxt)
    return "".join(result)


def _format_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc).strftime(_ICS_DATE_FORMAT)


def _parse_utc(value: str) -> datetime:
    return datetime.strptime(value, _ICS_DATE_FORMAT).replace(
        tzinfo=timezone.utc
    )


class IcsCalendarStore:
    """Stores calendar events as ``.ics`` files in one directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory: Path = directory or Settings.REMINDERS_DIR

    def _ensure_access(self) -> None:
        """Create the directory and verify it is writable."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except PermissionError as exc:
            raise ReminderPermissionError(
                "Calendar permission not granted"
            ) from exc
        if not os.access(self.directory, os.W_OK):
            raise ReminderPermissionError("Calendar permission not granted")

    def _event_path(self, event_id: str) -> Path:
        if not event_id.isalnum():
            raise ReminderError(f"Invalid event id: {event_id!r}")
        return self.directory / f"{event_id}.ics"

    def create_event(self, event: CalendarEvent) -> str:
        """Persist *event* and return its id."""
        self._ensure_access()
        event_id = event.event_id or uuid.uuid4().hex
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//catalog_browser//purchase reminders//EN",
            "BEGIN:VEVENT",
            f"UID:{event_id}",
            f"DTSTAMP:{_format_utc(datetime.now(timezone.utc))}",
            f"DTSTART:{_format_utc(event.start)}",
            f"DTEND:{_format_utc(event.end)}",
            f"SUMMARY:{_escape(event.title)}",
            f"DESCRIPTION:{_escape(event.notes)}",
            f"LOCATION:{_escape(event.location)}",
            "END:VEVENT",
            "END:VCALENDAR",
        ]
        path = self._event_path(event_id)
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write("\r\n".join(_fold(line) for line in lines) + "\r\n")
        except PermissionError as exc:
            raise ReminderPermissionError(
                "Calendar permission not granted"
            ) from exc
        except OSError as exc:
            raise ReminderError(f"Failed to write calendar event: {exc}") from exc

        logger.info("Created calendar event %s at %s", event_id, path)
        return event_id

    def _read_event(self, path: Path) -> CalendarEvent:
        fields: dict[str, str] = {}
        with open(path, encoding="utf-8") as f:
            for line in _unfold(f.read()):
                key, sep, value = line.partition(":")
                if sep:
                    fields.setdefault(key, value)
        return CalendarEvent(
            title=_unescape(fields.get("SUMMARY", "")),
            start=_parse_utc(fields["DTSTART"]),
            end=_parse_utc(fields["DTEND"]),
            notes=_unescape(fields.get("DESCRIPTION", "")),
            location=_unescape(fields.get("LOCATION", "")),
            event_id=fields.get("UID", path.stem),
        )

    def list_events(
        self, start: datetime, end: datetime,
    ) -> list[CalendarEvent]:
        """Return events starting within ``[start, end)``, earliest first."""
        if not self.directory.exists():
            return []
        events: list[CalendarEvent] = []
        for path in sorted(self.directory.glob("*.ics")):
            try:
                event = self._read_event(path)
            except (KeyError, ValueError, OSError):
                logger.warning("Skipping unreadable event file %s", path, exc_info=True)
                continue
            if start <= event.start < end:
                events.append(event)
        events.sort(key=lambda e: e.start)
        return events

    def delete_event(self, event_id: str) -> None:
        """Remove a stored event."""
        path = self._event_path(event_id)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise ReminderError(f"No calendar event {event_id}") from exc
        except PermissionError as exc:
            raise ReminderPermissionError(
                "Calendar permission not granted"
            ) from exc
        logger.info("Deleted calendar event %s", event_id)
