# src/reminders/errors.py

"""Failures raised by the reminder capability."""


class ReminderError(Exception):
    """A calendar or notification operation failed."""


class ReminderPermissionError(ReminderError):
    """Access to the calendar store was denied."""
