import asyncio
import os
import random
from typing import Optional
from supportwise.config import Settings, load_settings
from supportwise.data_models import parse_markup
from supportwise.session import ChatSession, Message
from supportwise.stores import ErrorLogStore, KnowledgeCatalogStore, TelemetryStore, VisitorFlagStore
import logging

# Setup basic logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

PROMPT = "\nYou (type 'reset' to start over, 'exit' to quit): "


def print_message(message: Message) -> None:
    if message.type != "bot":
        return
    print(f"\nBot: {parse_markup(message.content).to_terminal()}")


async def main_workflow(settings: Optional[Settings] = None):
    settings = settings or load_settings()

    catalog_store = KnowledgeCatalogStore(data_path=settings.catalog_path)
    telemetry = TelemetryStore()
    error_log = ErrorLogStore(telemetry=telemetry)
    visitor_store = VisitorFlagStore(settings.visitor_flag_path)

    try:
        await catalog_store.connect()
        await telemetry.connect()
        await error_log.connect()
        await visitor_store.connect()
    except Exception as e:
        logger.error(f"Failed to open stores: {e}", exc_info=True)
        return

    if not catalog_store.items:
        logger.warning(f"Catalog at {settings.catalog_path} is empty; every question will get a fallback reply.")

    session = ChatSession(
        catalog_store.items,
        telemetry,
        error_log,
        visitor_store,
        rng=random.Random(settings.random_seed),
        simulate_typing=settings.simulate_typing,
        retry_max_attempts=settings.retry_max_attempts,
        retry_delay_ms=settings.retry_delay_ms,
        on_message=print_message,
        user_agent="supportwise-cli",
    )
    logger.info(f"Starting SupportWise CLI. Session ID: {await session.start()}")

    try:
        while True:
            user_input_text = (await asyncio.to_thread(input, PROMPT)).strip()
            command = user_input_text.lower()
            if command == 'exit':
                break
            if not user_input_text:
                print("Please enter a message.")
                continue
            if command == 'reset':
                await session.reset()
                continue

            await session.handle_send_message(user_input_text)

    except (KeyboardInterrupt, EOFError):
        logger.info("Exiting CLI...")
    except Exception as e:
        logger.error(f"An unexpected error occurred in the main loop: {e}", exc_info=True)
    finally:
        await session.close()
        await visitor_store.disconnect()
        await error_log.disconnect()
        await telemetry.disconnect()
        await catalog_store.disconnect()
        logger.info("SupportWise CLI terminated.")


def run_cli():
    try:
        settings = load_settings()
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return

    logging.getLogger().setLevel(settings.log_level)
    try:
        asyncio.run(main_workflow(settings))
    except Exception as e:
        logger.error(f"CLI execution failed: {e}", exc_info=True)


if __name__ == "__main__":
    run_cli()
