"""Entry point for running the reminder scheduler.

Allows running with: python -m src.reminders
"""

import asyncio
import logging
import signal

from dotenv import load_dotenv

from src.database.connection import dispose_engine
from src.messaging.telegram.client import TelegramClient
from src.messaging.telegram.delivery import TelegramReminderDelivery
from src.messaging.telegram.utils.config import get_telegram_settings
from src.observability.sentry import init_sentry
from src.paths import ENV_FILE
from src.reminders.config import get_scheduler_settings
from src.reminders.loop import SchedulerLoop
from src.reminders.tick import SchedulerTick
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def _run() -> None:
    scheduler_settings = get_scheduler_settings()
    telegram_settings = get_telegram_settings()

    client = TelegramClient(
        bot_token=telegram_settings.bot_token,
        request_timeout=telegram_settings.request_timeout,
    )
    tick = SchedulerTick(
        delivery=TelegramReminderDelivery(client),
        escalation_interval=scheduler_settings.escalation_interval,
        batch_size=scheduler_settings.batch_size,
    )
    loop = SchedulerLoop(tick, poll_interval=scheduler_settings.poll_interval)

    logger.info(
        f"Scheduler configured: poll={scheduler_settings.poll_seconds}s, "
        f"repeat_until_ack={scheduler_settings.repeat_until_ack_minutes}min, "
        f"batch_size={scheduler_settings.batch_size}"
    )

    event_loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        event_loop.add_signal_handler(sig, loop.stop)

    await loop.run()


def main() -> None:
    """Start the reminder scheduler."""
    load_dotenv(ENV_FILE)
    configure_logging()
    init_sentry()
    try:
        asyncio.run(_run())
    finally:
        dispose_engine()


if __name__ == "__main__":
    main()
