"""WaterStore - the resident state of today's water intake.

Owns the newest-first list of today's entries and the daily goal, persists
both through a SettingsStore after every mutation, and discards entries left
over from a previous day.
"""

import logging
from datetime import datetime, tzinfo
from typing import Callable

from .config import DEFAULT_GOAL
from .core.logs import (
    LogEntry,
    compute_progress,
    decode_goal,
    deserialize_logs,
    encode_goal,
    is_stale,
    serialize_logs,
    total_amount,
)
from .ports.settings_store import SettingsStore

logger = logging.getLogger(__name__)

LOGS_KEY = "daily_logs"
GOAL_KEY = "target_goal"

Listener = Callable[["WaterStore"], None]


class StoreNotInitializedError(RuntimeError):
    """Raised when the store is used before initialize()."""


class WaterStore:
    """
    Single authoritative in-memory view of today's water intake.

    Created by the entry point and handed to whatever renders it; there is
    no module-level instance.
    """

    def __init__(
        self,
        settings: SettingsStore,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
        default_goal: int = DEFAULT_GOAL,
    ):
        self.settings = settings
        self.tz = tz
        self._clock = clock
        self.default_goal = default_goal
        self._logs: list[LogEntry] = []
        self._goal = default_goal
        self._ready = False
        self._listeners: list[Listener] = []

    def now(self) -> datetime:
        """Current wall-clock time, always timezone-aware."""
        if self._clock is not None:
            return self._clock()
        return datetime.now(self.tz).astimezone(self.tz)

    @property
    def is_ready(self) -> bool:
        return self._ready

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotInitializedError("WaterStore.initialize() must be called first")

    # ============== Lifecycle ==============

    def initialize(self) -> None:
        """Load persisted state, then drop entries from a previous day."""
        self._logs = self._load_logs()
        self._goal = self._load_goal()
        self._ready = True
        logger.debug(f"Loaded {len(self._logs)} entries, goal {self._goal} ml")
        self.check_and_reset_logs()

    def _load_logs(self) -> list[LogEntry]:
        data = self.settings.load(LOGS_KEY)
        if not data:
            return []
        try:
            return deserialize_logs(data)
        except (ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable saved logs: {e}")
            return []

    def _load_goal(self) -> int:
        data = self.settings.load(GOAL_KEY)
        if not data:
            return self.default_goal
        try:
            return decode_goal(data)
        except ValueError as e:
            logger.warning(f"Discarding unreadable saved goal: {e}")
            return self.default_goal

    # ============== Persistence ==============

    def _save(self, key: str, data: bytes) -> None:
        try:
            self.settings.save(key, data)
        except OSError as e:
            logger.error(f"Failed to save {key}: {e}")

    def _save_logs(self) -> None:
        self._save(LOGS_KEY, serialize_logs(self._logs))

    # ============== Change notification ==============

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener(store) after every mutation.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ============== Mutations ==============

    def add_log(self, amount: int) -> LogEntry:
        """
        Record a drink of amount ml at the current time.

        The amount is not validated; zero and negative values are stored as
        given.
        """
        self._require_ready()
        self.check_and_reset_logs()
        entry = LogEntry(timestamp=self.now(), amount=amount)
        self._logs.insert(0, entry)
        self._save_logs()
        logger.debug(f"Logged {amount} ml (total {self.total_today()} ml)")
        self._notify()
        return entry

    def check_and_reset_logs(self) -> bool:
        """
        Clear the log if its newest entry is not from today.

        Returns True if the log was cleared.
        """
        self._require_ready()
        if not is_stale(self._logs, self.now(), self.tz):
            return False
        last_day = self._logs[0].local_date(self.tz)
        logger.info(f"New day: clearing {len(self._logs)} entries from {last_day}")
        self._logs.clear()
        self._save_logs()
        self._notify()
        return True

    def clear_all(self) -> None:
        """Delete all of today's entries."""
        self._require_ready()
        self._logs.clear()
        self._save_logs()
        logger.debug("Cleared all entries")
        self._notify()

    def set_target_goal(self, value: int) -> None:
        """Overwrite the daily goal. Zero and negative values are accepted."""
        self._require_ready()
        self._goal = value
        self._save(GOAL_KEY, encode_goal(value))
        logger.debug(f"Goal set to {value} ml")
        self._notify()

    # ============== Queries ==============

    @property
    def daily_logs(self) -> list[LogEntry]:
        """Today's entries, newest first. Returns a copy."""
        self._require_ready()
        return list(self._logs)

    @property
    def target_goal(self) -> int:
        self._require_ready()
        return self._goal

    def total_today(self) -> int:
        """Total ml logged today."""
        return total_amount(self.daily_logs)

    def progress(self) -> float:
        """Fraction of the goal reached, in [0, 1]."""
        return compute_progress(self.total_today(), self.target_goal)
