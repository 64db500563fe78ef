"""Telegram command handlers."""

import logging

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes, ConversationHandler

from .config import Config
from .core.reminders import Reminder, ReminderInterval
from .core.summary import format_log, goal_reached_message
from .reminders import cancel_reminders, reminder_interval, schedule_reminders
from .store import WaterStore
from .telegram_format import send_markdown, status_markdown, to_markdown_v2
from .telegram_states import AddStates

logger = logging.getLogger(__name__)


def _store(context: ContextTypes.DEFAULT_TYPE) -> WaterStore:
    return context.bot_data["store"]


def _config(context: ContextTypes.DEFAULT_TYPE) -> Config:
    return context.bot_data["config"]


def parse_amount(text: str | None) -> int | None:
    """Parse a whole number of ml, or None if the text isn't one."""
    if not text:
        return None
    text = text.strip().lower().removesuffix("ml").strip()
    try:
        return int(text)
    except ValueError:
        return None


def quick_add_keyboard(amounts: list[int]) -> InlineKeyboardMarkup:
    """Inline buttons for the quick-add amounts plus a custom entry."""
    buttons = [InlineKeyboardButton(f"+{a} ml", callback_data=f"add:{a}") for a in amounts]
    buttons.append(InlineKeyboardButton("Custom", callback_data="add:custom"))
    return InlineKeyboardMarkup([buttons])


def _is_allowed(update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
    """Button presses bypass AuthFilter, so callback handlers check the user here."""
    allowed = _config(context).telegram_allowed_users
    if not allowed:
        return True
    user = update.effective_user
    if user is None or user.id not in allowed:
        logger.warning(f"Ignored button press from unauthorized user {user.id if user else None}")
        return False
    return True


def _added_text(store: WaterStore, amount: int) -> str:
    text = f"Added {amount} ml.\n\n{status_markdown(store)}"
    congrats = goal_reached_message(store.total_today(), store.target_goal)
    if congrats:
        text += f"\n\n{congrats}"
    return text


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I'm WaterLog, your hydration tracker.\n\n"
        "Commands:\n"
        "/add - Log a drink\n"
        "/status - Today's total and progress\n"
        "/log - Today's drinks\n"
        "/goal - Show or set your daily goal\n"
        "/remind - Drink reminders (30, 60, 120 or off)\n"
        "/clear - Delete today's records\n"
        "/help - Show all commands",
        reply_markup=quick_add_keyboard(_config(context).quick_amounts),
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*WaterLog Commands*\n\n"
        "/add [ml] - Log a drink (asks for the amount if omitted)\n"
        "/status - Today's total and progress\n"
        "/log - Today's drinks, newest first\n"
        "/goal [ml] - Show or set your daily goal\n"
        "/remind [30|60|120|off] - Drink reminders\n"
        "/clear - Delete all of today's records\n"
        "/cancel - Cancel current operation\n",
        parse_mode="Markdown",
    )


async def status_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /status command - progress plus quick-add buttons."""
    store = _store(context)
    store.check_and_reset_logs()
    await send_markdown(
        update.message,
        status_markdown(store),
        reply_markup=quick_add_keyboard(_config(context).quick_amounts),
    )


async def log_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /log command - list today's drinks."""
    store = _store(context)
    store.check_and_reset_logs()
    log_text = format_log(store.daily_logs, store.tz)
    await send_markdown(update.message, f"*Today's Drinks*\n\n{log_text}")


async def goal_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /goal command - show or set the daily goal."""
    store = _store(context)

    if not context.args:
        await update.message.reply_text(f"Current goal: {store.target_goal} ml")
        return

    value = parse_amount(context.args[0])
    if value is None:
        await update.message.reply_text("Usage: /goal 2000")
        return

    store.set_target_goal(value)

    # Reminder text carries the goal, so refresh an active schedule
    scheduler = context.bot_data.get("scheduler")
    if scheduler is not None:
        interval = reminder_interval(scheduler)
        if interval is not None:
            schedule_reminders(
                scheduler,
                send_reminder,
                interval,
                value,
                args=[context.bot, _config(context).telegram_allowed_users],
            )

    await update.message.reply_text(f"Goal set to {value} ml.")


async def remind_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /remind command - set or cancel drink reminders."""
    scheduler = context.bot_data.get("scheduler")
    if scheduler is None:
        await update.message.reply_text("Reminders are not available.")
        return

    if not context.args:
        interval = reminder_interval(scheduler)
        if interval is None:
            await update.message.reply_text("Reminders are off. Use /remind 30, 60 or 120.")
        else:
            await update.message.reply_text(f"Reminding you {interval.label}.")
        return

    arg = context.args[0].strip().lower()
    if arg == "off":
        cancel_reminders(scheduler)
        await update.message.reply_text("Reminders off.")
        return

    try:
        interval = ReminderInterval.parse(arg)
    except ValueError:
        await update.message.reply_text("Usage: /remind 30, /remind 60, /remind 120 or /remind off")
        return

    user_ids = _config(context).telegram_allowed_users
    if not user_ids:
        await update.message.reply_text(
            "No TELEGRAM_ALLOWED_USERS configured - reminders have nobody to go to."
        )
        return

    schedule_reminders(
        scheduler,
        send_reminder,
        interval,
        _store(context).target_goal,
        args=[context.bot, user_ids],
    )
    await update.message.reply_text(f"OK, I'll remind you {interval.label}.")


# ============== Quick Add ==============


async def quick_add_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a quick-add button tap."""
    query = update.callback_query
    if not _is_allowed(update, context):
        await query.answer("Unauthorized.")
        return
    await query.answer()

    amount = parse_amount(query.data.removeprefix("add:"))
    if amount is None:
        return

    store = _store(context)
    store.add_log(amount)
    await query.edit_message_text(
        to_markdown_v2(_added_text(store, amount)),
        parse_mode="MarkdownV2",
        reply_markup=quick_add_keyboard(_config(context).quick_amounts),
    )


# ============== Clear Confirmation ==============


async def clear_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /clear command - ask before deleting."""
    keyboard = [
        [
            InlineKeyboardButton("Yes, delete all", callback_data="clear:yes"),
            InlineKeyboardButton("No, keep them", callback_data="clear:no"),
        ]
    ]
    await update.message.reply_text(
        "Delete all of today's records?",
        reply_markup=InlineKeyboardMarkup(keyboard),
    )


async def clear_confirm_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the delete confirmation."""
    query = update.callback_query
    if not _is_allowed(update, context):
        await query.answer("Unauthorized.")
        return
    await query.answer()

    if query.data == "clear:yes":
        _store(context).clear_all()
        await query.edit_message_text("All records for today deleted.")
    else:
        await query.edit_message_text("Nothing deleted.")


# ============== Custom Amount Conversation ==============


async def add_start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start logging a drink: /add 350 logs directly, /add alone asks."""
    if update.callback_query:
        if not _is_allowed(update, context):
            await update.callback_query.answer("Unauthorized.")
            return ConversationHandler.END
        await update.callback_query.answer()
        await update.callback_query.message.reply_text("How much did you drink? (ml, e.g. 350)")
        return AddStates.AMOUNT

    amount = parse_amount(context.args[0]) if context.args else None
    if amount is None:
        await update.message.reply_text("How much did you drink? (ml, e.g. 350)")
        return AddStates.AMOUNT

    store = _store(context)
    store.add_log(amount)
    await send_markdown(update.message, _added_text(store, amount))
    return ConversationHandler.END


async def add_amount_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the typed amount."""
    amount = parse_amount(update.message.text)
    if amount is None:
        # Not a number: drop it and keep waiting
        await update.message.reply_text("Please send a number in ml, or /cancel.")
        return AddStates.AMOUNT

    store = _store(context)
    store.add_log(amount)
    await send_markdown(update.message, _added_text(store, amount))
    return ConversationHandler.END


async def add_cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Cancel the custom amount conversation."""
    await update.message.reply_text("Cancelled.")
    return ConversationHandler.END


# ============== Scheduled Jobs ==============


async def send_reminder(bot: Bot, user_ids: list[int], reminder: Reminder):
    """Send a drink reminder to all authorized users."""
    logger.info("Sending water reminder")
    for user_id in user_ids:
        try:
            await bot.send_message(chat_id=user_id, text=reminder.as_text())
        except Exception as e:
            logger.error(f"Failed to send reminder to user {user_id}: {e}")
