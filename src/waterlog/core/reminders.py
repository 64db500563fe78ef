"""Reminder intervals and message text - no I/O dependencies."""

from dataclasses import dataclass
from enum import Enum


class ReminderInterval(Enum):
    """How often to remind the user to drink, in minutes."""

    HALF_HOUR = 30
    HOURLY = 60
    TWO_HOURS = 120

    @property
    def minutes(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'every 30 minutes'."""
        if self.value < 60:
            return f"every {self.value} minutes"
        hours = self.value // 60
        return "every hour" if hours == 1 else f"every {hours} hours"

    @classmethod
    def parse(cls, text: str | int) -> "ReminderInterval":
        """Parse a minute count. Raises ValueError for unsupported intervals."""
        try:
            minutes = int(str(text).strip())
        except ValueError:
            raise ValueError(f"Invalid reminder interval: {text!r}") from None
        try:
            return cls(minutes)
        except ValueError:
            choices = ", ".join(str(i.value) for i in cls)
            raise ValueError(f"Reminder interval must be one of {choices} minutes, got {minutes}") from None


DEFAULT_INTERVAL = ReminderInterval.HOURLY


@dataclass(frozen=True)
class Reminder:
    """Notification content."""

    title: str
    body: str

    def as_text(self) -> str:
        return f"{self.title}\n{self.body}"


def reminder_message(goal: int) -> Reminder:
    """Build the reminder notification for the current goal."""
    return Reminder(
        title="💧 Time to drink water!",
        body=f"Stay hydrated for your health. (Current goal: {goal}ml)",
    )
