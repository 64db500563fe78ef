"""Repeating drink reminders on top of APScheduler.

Best-effort only: jobs fire while the process runs and the scheduler is
started. Nothing here reports back to the store.
"""

import logging
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .core.reminders import Reminder, ReminderInterval, reminder_message

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "water_reminder"


def schedule_reminders(
    scheduler: BaseScheduler,
    send: Callable,
    interval: ReminderInterval,
    goal: int,
    args: list | None = None,
):
    """
    Replace any pending reminder with one repeating every interval.

    The message is built from goal now, at schedule time. send is called as
    send(*args, reminder) and may be a coroutine function when the scheduler
    is an AsyncIOScheduler.
    """
    cancel_reminders(scheduler)
    reminder = reminder_message(goal)
    job = scheduler.add_job(
        send,
        IntervalTrigger(minutes=interval.minutes),
        args=[*(args or []), reminder],
        id=REMINDER_JOB_ID,
        name=f"Water reminder ({interval.label})",
        replace_existing=True,
    )
    logger.info(f"Scheduled water reminders {interval.label}")
    return job


def cancel_reminders(scheduler: BaseScheduler) -> bool:
    """Remove the pending reminder job. Returns True if one existed."""
    if scheduler.get_job(REMINDER_JOB_ID) is None:
        return False
    scheduler.remove_job(REMINDER_JOB_ID)
    logger.info("Cancelled water reminders")
    return True


def reminder_interval(scheduler: BaseScheduler) -> ReminderInterval | None:
    """Interval of the active reminder job, or None if reminders are off."""
    job = scheduler.get_job(REMINDER_JOB_ID)
    if job is None:
        return None
    minutes = int(job.trigger.interval.total_seconds() // 60)
    try:
        return ReminderInterval(minutes)
    except ValueError:
        return None


def print_reminder(echo: Callable[[str], None], reminder: Reminder) -> None:
    """Job target for terminal reminders."""
    echo(reminder.as_text())
