"""Telegram message formatting utilities."""

import telegramify_markdown

from .core.summary import format_progress, format_progress_bar
from .store import WaterStore


def to_markdown_v2(text: str) -> str:
    """Convert markdown to Telegram MarkdownV2."""
    return telegramify_markdown.markdownify(text)


def status_markdown(store: WaterStore) -> str:
    """Markdown status block for the current store state."""
    progress = store.progress()
    return (
        "*Today's Water*\n\n"
        f"`{format_progress_bar(progress, width=16)}`\n"
        f"{format_progress(store.total_today(), store.target_goal, progress)}"
    )


async def send_markdown(message, text: str, *, reply_markup=None):
    """Reply to message with markdown text, converting to MarkdownV2."""
    converted = to_markdown_v2(text)
    chunks = [converted[i : i + 4000] for i in range(0, len(converted), 4000)]
    for i, chunk in enumerate(chunks):
        # Buttons go on the last chunk only
        markup = reply_markup if i == len(chunks) - 1 else None
        await message.reply_text(chunk, parse_mode="MarkdownV2", reply_markup=markup)
