"""Configuration management for WaterLog."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.reminders import DEFAULT_INTERVAL, ReminderInterval

logger = logging.getLogger(__name__)

WATERLOG_HOME = Path(os.environ.get("WATERLOG_HOME", Path.home() / ".waterlog"))
CONFIG_FILE = WATERLOG_HOME / "config" / "waterlog.conf"
DATA_DIR = WATERLOG_HOME / "data"

DEFAULT_GOAL = 2000


@dataclass
class Config:
    """WaterLog configuration."""

    timezone: str = ""
    data_dir: str = ""
    default_goal: int = DEFAULT_GOAL
    quick_amounts: list[int] = field(default_factory=lambda: [200, 500])
    reminder_interval: ReminderInterval = DEFAULT_INTERVAL
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)

    @property
    def tz(self) -> ZoneInfo | None:
        """Configured time zone, or None for the system local zone."""
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown TIMEZONE {self.timezone!r}, using system local time")
            return None

    @property
    def data_path(self) -> Path:
        """Resolve the data directory."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            if end_quote != -1:
                return value[1:end_quote]
            return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int_list(key: str, value: str) -> list[int] | None:
    try:
        return [int(v.strip()) for v in value.split(",") if v.strip()]
    except ValueError:
        logger.warning(f"Failed to parse {key.upper()}: {value!r}")
        return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from waterlog.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "data_dir":
                config.data_dir = value
            case "default_goal":
                try:
                    config.default_goal = int(value)
                except ValueError:
                    logger.warning(f"Invalid DEFAULT_GOAL {value!r}, using {DEFAULT_GOAL}")
            case "quick_amounts":
                amounts = _parse_int_list(key, value)
                if amounts:
                    config.quick_amounts = amounts
            case "reminder_interval":
                try:
                    config.reminder_interval = ReminderInterval.parse(value)
                except ValueError as e:
                    logger.warning(f"{e}; using {DEFAULT_INTERVAL.minutes} minutes")
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                users = _parse_int_list(key, value)
                if users is not None:
                    config.telegram_allowed_users = users

    return config
