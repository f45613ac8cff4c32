"""Main application entry point."""
import logging
from typing import Optional
from warnings import filterwarnings

from telegram.warnings import PTBUserWarning

# Suppress the warning about CallbackQueryHandler and per_message
filterwarnings(action="ignore", message=r".*CallbackQueryHandler", category=PTBUserWarning)

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)

from vocabot.config import settings
from vocabot.monitoring import start_monitoring
from vocabot.bot import (
    handle_start,
    handle_callback,
    handle_message,
    handle_import_words,
    handle_learning_response,
    MAIN_MENU,
    IMPORTING,
    LEARNING,
)


def build_conversation_handler() -> ConversationHandler:
    """Create conversation handler for both messages and callbacks."""
    return ConversationHandler(
        entry_points=[CommandHandler("start", handle_start)],
        states={
            MAIN_MENU: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message),
                CallbackQueryHandler(handle_callback),
            ],
            IMPORTING: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_import_words),
                CallbackQueryHandler(handle_callback),
            ],
            LEARNING: [
                CallbackQueryHandler(handle_learning_response, pattern=r"^learn_"),
                CallbackQueryHandler(handle_callback),
            ],
        },
        fallbacks=[CommandHandler("start", handle_start)],
        per_message=False,
    )


class VocaBot:
    """Main application class."""

    def __init__(self):
        """Initialize the application."""
        self.application: Optional[Application] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    async def start(self) -> None:
        """Start the application."""
        if self.running:
            return

        settings.validate_bot()

        try:
            if settings.monitoring.enabled:
                start_monitoring(settings.monitoring.port)
                self.logger.info(f"Metrics server listening on port {settings.monitoring.port}")

            # Create application
            self.application = Application.builder().token(settings.bot.token).build()
            self.logger.info("Application created")

            self.application.add_handler(build_conversation_handler())
            self.logger.info("Handlers added")

            # Start application
            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling()
            self.logger.info("Application started")

            self.running = True

        except Exception as e:
            self.logger.error("Failed to start application: %s", str(e))
            await self.stop()
            raise

    async def stop(self) -> None:
        """Stop the application."""
        if not self.application:
            self.running = False
            return

        try:
            if self.application.updater and self.application.updater.running:
                await self.application.updater.stop()
            if self.application.running:
                await self.application.stop()
            await self.application.shutdown()
            self.logger.info("Application stopped")
        except Exception as e:
            self.logger.error("Error while stopping application: %s", str(e))
            raise
        finally:
            self.application = None
            self.running = False
