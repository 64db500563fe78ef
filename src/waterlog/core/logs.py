"""Pure water log domain logic - no I/O dependencies."""

import json
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo


@dataclass(frozen=True)
class LogEntry:
    """One recorded drink: how much and when."""

    timestamp: datetime
    amount: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def local_date(self, tz: tzinfo | None = None) -> date:
        """Calendar date of this entry in the given zone (system local if None)."""
        return self.timestamp.astimezone(tz).date()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LogEntry":
        """Create LogEntry from its serialized form."""
        if not isinstance(data, dict):
            raise ValueError(f"Log entry must be an object, got {type(data).__name__}")
        try:
            entry_id = data["id"]
            raw_timestamp = data["timestamp"]
            amount = data["amount"]
        except KeyError as e:
            raise ValueError(f"Log entry missing field: {e.args[0]}") from e

        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError("Log entry id must be a non-empty string")
        if not isinstance(raw_timestamp, str):
            raise ValueError("Log entry timestamp must be an ISO-8601 string")
        # bool is an int subclass; reject it explicitly
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"Log entry amount must be an integer, got {amount!r}")

        timestamp = datetime.fromisoformat(raw_timestamp)
        if timestamp.tzinfo is None:
            raise ValueError(f"Log entry timestamp has no UTC offset: {raw_timestamp}")
        try:
            utc = timestamp.astimezone(timezone.utc)
        except OverflowError:
            raise ValueError(f"Log entry timestamp out of range: {raw_timestamp}") from None
        # Within a day of the datetime limits, shifting into a local zone can overflow
        if utc.year in (datetime.min.year, datetime.max.year):
            raise ValueError(f"Log entry timestamp out of range: {raw_timestamp}")

        return cls(timestamp=timestamp, amount=amount, id=entry_id)


def total_amount(entries: list[LogEntry]) -> int:
    """Sum of all amounts in ml."""
    return sum(e.amount for e in entries)


def compute_progress(total: int, goal: int) -> float:
    """
    Fraction of the goal reached, clamped to [0, 1].

    A zero (or negative) goal yields 0 rather than dividing by zero.
    """
    if goal <= 0:
        return 0.0
    return max(0.0, min(1.0, total / goal))


def is_stale(entries: list[LogEntry], now: datetime, tz: tzinfo | None = None) -> bool:
    """
    True if the newest entry was recorded on an earlier (or later) calendar day.

    Entries are newest-first, so only the first one is inspected.
    Pure function - no I/O.
    """
    if not entries:
        return False
    return entries[0].local_date(tz) != now.astimezone(tz).date()


def serialize_logs(entries: list[LogEntry]) -> bytes:
    """Encode the log sequence as a UTF-8 JSON array, preserving order."""
    return json.dumps([e.to_dict() for e in entries]).encode("utf-8")


def deserialize_logs(data: bytes) -> list[LogEntry]:
    """
    Decode a JSON array produced by serialize_logs.

    Raises ValueError on anything malformed.
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except RecursionError:
        raise ValueError("Log data is nested too deeply") from None
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of log entries, got {type(payload).__name__}")
    return [LogEntry.from_dict(item) for item in payload]


def encode_goal(goal: int) -> bytes:
    return str(goal).encode("ascii")


def decode_goal(data: bytes) -> int:
    """Parse a goal written by encode_goal. Raises ValueError if malformed."""
    return int(data.decode("ascii").strip())
