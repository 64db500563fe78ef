"""WaterLog CLI - Personal Hydration Tracker."""

import json
import logging
import sys

import click
from apscheduler.schedulers.blocking import BlockingScheduler

from .adapters.file_settings import FileSettingsStore
from .config import Config, load_config
from .core.reminders import ReminderInterval
from .core.summary import format_log, format_progress, format_progress_bar, goal_reached_message
from .reminders import print_reminder, schedule_reminders
from .store import WaterStore


def open_store(config: Config) -> WaterStore:
    """Build and load the store backed by the configured data directory."""
    store = WaterStore(
        FileSettingsStore(config.data_path),
        tz=config.tz,
        default_goal=config.default_goal,
    )
    store.initialize()
    return store


@click.group()
@click.version_option(package_name="waterlog")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, verbose: bool):
    """WaterLog - Personal Hydration Tracker."""
    if verbose:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.ensure_object(dict)


def _get_store(ctx) -> tuple[Config, WaterStore]:
    """Load config and store once per invocation."""
    if "store" not in ctx.obj:
        config = load_config()
        ctx.obj["config"] = config
        ctx.obj["store"] = open_store(config)
    return ctx.obj["config"], ctx.obj["store"]


def _echo_progress(store: WaterStore) -> None:
    total = store.total_today()
    click.echo(f"{format_progress_bar(store.progress())} {format_progress(total, store.target_goal, store.progress())}")


@main.command()
@click.argument("amount", type=int)
@click.pass_context
def add(ctx, amount: int):
    """Log AMOUNT ml of water."""
    _, store = _get_store(ctx)
    store.add_log(amount)
    click.echo(f"Added {amount} ml.")
    _echo_progress(store)
    congrats = goal_reached_message(store.total_today(), store.target_goal)
    if congrats:
        click.echo(congrats)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx, as_json: bool):
    """Show today's total against the goal."""
    _, store = _get_store(ctx)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "total_today": store.total_today(),
                    "target_goal": store.target_goal,
                    "progress": store.progress(),
                    "entries": len(store.daily_logs),
                },
                indent=2,
            )
        )
        return

    _echo_progress(store)


@main.command("log")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show_log(ctx, as_json: bool):
    """List today's drinks, newest first."""
    config, store = _get_store(ctx)
    entries = store.daily_logs

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    click.echo(format_log(entries, config.tz))


@main.command()
@click.argument("value", type=int, required=False)
@click.pass_context
def goal(ctx, value: int | None):
    """Show the daily goal, or set it to VALUE ml."""
    _, store = _get_store(ctx)

    if value is None:
        click.echo(f"Current goal: {store.target_goal} ml")
        return

    store.set_target_goal(value)
    click.echo(f"Goal set to {value} ml.")


@main.command()
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def clear(ctx, yes: bool):
    """Delete all of today's records."""
    _, store = _get_store(ctx)

    if not yes and not click.confirm("Delete all of today's records?"):
        click.echo("Nothing deleted.")
        return

    store.clear_all()
    click.echo("All records for today deleted.")


@main.command()
@click.option(
    "--every",
    "minutes",
    type=click.Choice([str(i.minutes) for i in ReminderInterval]),
    default=None,
    help="Minutes between reminders (default from config)",
)
@click.pass_context
def remind(ctx, minutes: str | None):
    """Print a drink reminder at a fixed interval until interrupted."""
    config, store = _get_store(ctx)
    interval = ReminderInterval.parse(minutes) if minutes else config.reminder_interval

    scheduler = BlockingScheduler(timezone=config.tz) if config.tz else BlockingScheduler()
    schedule_reminders(scheduler, print_reminder, interval, store.target_goal, args=[click.echo])
    click.echo(f"Reminding you {interval.label}. Press Ctrl+C to stop.")

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        click.echo("Reminders stopped.")


@main.command()
def bot():
    """Run the Telegram bot."""
    from .telegram_bot import run_bot

    try:
        run_bot()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
