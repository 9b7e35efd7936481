"""
Script to run the Telegram bot.

Usage:
    python -m propmatch.scripts.run_bot
"""

import sys

import structlog

from propmatch.bot import PropertyBot
from propmatch.config import configure_logging

logger = structlog.get_logger()


def main():
    """Bot entry point."""
    configure_logging()
    logger.info("Starting property bot...")

    try:
        bot = PropertyBot()
        bot.run()
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.error("Fatal bot error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
