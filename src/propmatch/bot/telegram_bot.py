"""
Telegram bot.

Wires the preference handlers into a python-telegram-bot Application.
"""

from typing import Optional

import structlog
from telegram import Update
from telegram.ext import Application, CallbackQueryHandler, CommandHandler

from propmatch.bot.handlers import PreferenceHandler
from propmatch.config import get_settings
from propmatch.conversation import ChatService, ConversationFlow
from propmatch.matching import Searcher, get_searcher

logger = structlog.get_logger()


class PropertyBot:
    """
    Property search bot.

    Responsibilities:
    - Register commands and button callbacks
    - Run the bot in polling mode
    """

    def __init__(
        self,
        token: Optional[str] = None,
        searcher: Optional[Searcher] = None,
        flow: Optional[ConversationFlow] = None,
    ):
        settings = get_settings()
        self.token = token or settings.telegram_bot_token
        if not self.token:
            raise ValueError("TELEGRAM_BOT_TOKEN is required to run the bot.")

        flow = flow or ConversationFlow(
            confirm_before_search=settings.confirm_before_search
        )
        self.service = ChatService(flow, searcher or get_searcher(settings))
        self.handler = PreferenceHandler(self.service)

        self.application: Optional[Application] = None

    def setup(self) -> Application:
        """Builds the Telegram application."""
        self.application = Application.builder().token(self.token).build()

        self.application.add_handler(CommandHandler("start", self.handler.start))
        self.application.add_handler(CommandHandler("reset", self.handler.reset))
        self.application.add_handler(CommandHandler("help", self.handler.help_command))
        self.application.add_handler(CallbackQueryHandler(self.handler.handle_callback))

        logger.info("Telegram bot configured")
        return self.application

    def run(self):
        """Starts the bot in polling mode."""
        if not self.application:
            self.setup()

        logger.info("Starting Telegram bot...")
        self.application.run_polling(allowed_updates=Update.ALL_TYPES)
