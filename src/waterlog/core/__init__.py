"""Functional core - pure business logic with no I/O."""

from .logs import (
    LogEntry,
    total_amount,
    compute_progress,
    is_stale,
    serialize_logs,
    deserialize_logs,
    encode_goal,
    decode_goal,
)
from .reminders import Reminder, ReminderInterval, DEFAULT_INTERVAL, reminder_message
from .summary import format_amount, format_progress, format_progress_bar, format_log_line, format_log

__all__ = [
    # Logs
    "LogEntry",
    "total_amount",
    "compute_progress",
    "is_stale",
    "serialize_logs",
    "deserialize_logs",
    "encode_goal",
    "decode_goal",
    # Reminders
    "Reminder",
    "ReminderInterval",
    "DEFAULT_INTERVAL",
    "reminder_message",
    # Summary
    "format_amount",
    "format_progress",
    "format_progress_bar",
    "format_log_line",
    "format_log",
]
