"""WaterLog Telegram Bot."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .adapters.file_settings import FileSettingsStore
from .config import Config, load_config
from .reminders import schedule_reminders
from .store import WaterStore
from .telegram_handlers import (
    start_handler,
    help_handler,
    status_handler,
    log_handler,
    goal_handler,
    remind_handler,
    quick_add_handler,
    clear_handler,
    clear_confirm_handler,
    add_start_handler,
    add_amount_handler,
    add_cancel_handler,
    send_reminder,
)
from .telegram_states import AddStates

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None, store: WaterStore | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to waterlog.conf"
        )

    if store is None:
        store = WaterStore(
            FileSettingsStore(config.data_path),
            tz=config.tz,
            default_goal=config.default_goal,
        )
        store.initialize()

    # Build application
    app = Application.builder().token(config.telegram_bot_token).build()
    app.bot_data["config"] = config
    app.bot_data["store"] = store

    # Create auth filter
    auth_filter = AuthFilter(config.telegram_allowed_users)

    # Simple commands (with auth filter)
    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("status", status_handler, filters=auth_filter))
    app.add_handler(CommandHandler("log", log_handler, filters=auth_filter))
    app.add_handler(CommandHandler("goal", goal_handler, filters=auth_filter))
    app.add_handler(CommandHandler("remind", remind_handler, filters=auth_filter))
    app.add_handler(CommandHandler("clear", clear_handler, filters=auth_filter))

    # Custom amount conversation (multi-step)
    add_conv = ConversationHandler(
        entry_points=[
            CommandHandler("add", add_start_handler, filters=auth_filter),
            CallbackQueryHandler(add_start_handler, pattern=r"^add:custom$"),
        ],
        states={
            AddStates.AMOUNT: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, add_amount_handler),
            ],
        },
        fallbacks=[CommandHandler("cancel", add_cancel_handler)],
        per_user=True,
    )
    app.add_handler(add_conv)

    # Inline buttons
    app.add_handler(CallbackQueryHandler(quick_add_handler, pattern=r"^add:-?\d+$"))
    app.add_handler(CallbackQueryHandler(clear_confirm_handler, pattern=r"^clear:"))

    # Handle unauthorized access attempts
    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in waterlog.conf"
        )

    # Add catch-all for unauthorized users if we have an allowlist
    if config.telegram_allowed_users:
        app.add_handler(
            MessageHandler(~auth_filter & filters.ALL, unauthorized_handler)
        )

    return app


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the reminder scheduler, starting with the configured interval."""
    if config is None:
        config = load_config()

    scheduler = AsyncIOScheduler(timezone=config.tz) if config.tz else AsyncIOScheduler()
    app.bot_data["scheduler"] = scheduler

    if config.telegram_allowed_users:
        store: WaterStore = app.bot_data["store"]
        schedule_reminders(
            scheduler,
            send_reminder,
            config.reminder_interval,
            store.target_goal,
            args=[app.bot, config.telegram_allowed_users],
        )
    else:
        logger.info("No TELEGRAM_ALLOWED_USERS configured - reminders have nobody to go to")

    return scheduler


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    app.post_init = post_init

    # Log startup info
    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting WaterLog Telegram bot...")

    # Run bot
    app.run_polling(allowed_updates=Update.ALL_TYPES)
