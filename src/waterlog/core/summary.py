"""Pure formatting of progress and log lines - no I/O dependencies."""

from datetime import tzinfo

from .logs import LogEntry


def format_amount(amount: int) -> str:
    return f"{amount} ml"


def format_progress(total: int, goal: int, progress: float) -> str:
    """
    Format the headline progress line.

    Example: "700 / 2000 ml (35%)"
    """
    return f"{total} / {goal} ml ({progress * 100:.0f}%)"


def format_progress_bar(progress: float, width: int = 20) -> str:
    """Render progress as a fixed-width text bar."""
    filled = round(progress * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def format_log_line(entry: LogEntry, tz: tzinfo | None = None) -> str:
    """
    Format a single log entry for display.

    Example: "14:30  500 ml"
    """
    time_str = entry.timestamp.astimezone(tz).strftime("%H:%M")
    return f"{time_str}  {format_amount(entry.amount)}"


def format_log(entries: list[LogEntry], tz: tzinfo | None = None, empty_msg: str = "No drinks logged today.") -> str:
    """Format a newest-first log, one entry per line."""
    if not entries:
        return empty_msg
    return "\n".join(format_log_line(e, tz) for e in entries)


def goal_reached_message(total: int, goal: int) -> str | None:
    """Congratulation line once the goal is met, else None."""
    if goal > 0 and total >= goal:
        return f"Goal reached! {total} ml of {goal} ml today."
    return None
