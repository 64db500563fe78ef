"""Conversation states for Telegram bot."""

from enum import IntEnum, auto


class AddStates(IntEnum):
    """States for the custom amount conversation."""

    AMOUNT = auto()
