"""Main entry point for the bot."""
import asyncio
import logging
import signal

from vocabot.app import VocaBot
from vocabot.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def shutdown(sig, loop):
    """Cleanup tasks tied to the service's shutdown."""
    print()  # Print newline before logging
    logger.info(f"Received exit signal {sig.name}...")

    tasks = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    for task in tasks:
        task.cancel()

    logger.info(f"Cancelling {len(tasks)} outstanding tasks")
    await asyncio.gather(*tasks, return_exceptions=True)

    loop.stop()


def handle_exception(loop, context):
    """Handle exceptions in the event loop."""
    msg = context.get("exception", context["message"])
    logger.error(f"Caught exception: {msg}")
    logger.info("Shutting down...")
    loop.stop()


async def run_bot() -> None:
    """Run the bot until it is cancelled."""
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda s=sig: asyncio.create_task(shutdown(s, loop))
        )

    loop.set_exception_handler(handle_exception)

    bot = VocaBot()
    try:
        logger.info("Starting bot...")
        await bot.start()

        # Keep the application running
        while True:
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                break
    finally:
        logger.info("Cleaning up...")
        await bot.stop()


def main() -> None:
    """Console script entry point."""
    setup_logging("Starting VocaBot ...")

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(run_bot())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except RuntimeError as e:
        # loop.stop() from the signal handler interrupts run_until_complete
        logger.info(f"Event loop stopped: {e}")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
