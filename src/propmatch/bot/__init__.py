"""
Telegram bot.

Chat transport for the preference conversation.
"""

from propmatch.bot.telegram_bot import PropertyBot
from propmatch.bot.handlers import PreferenceHandler, build_keyboard, format_property_card

__all__ = [
    "PropertyBot",
    "PreferenceHandler",
    "build_keyboard",
    "format_property_card",
]
