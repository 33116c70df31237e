"""Long polling bot that receives reminder acknowledgments.

Run with: python -m src.messaging.telegram
"""

from __future__ import annotations

import logging
import signal
import time
from types import FrameType

from dotenv import load_dotenv

from src.database.connection import SessionFactory, dispose_engine, get_session
from src.database.telegram import advance_polling_cursor, get_or_create_polling_cursor
from src.messaging.telegram.callbacks import process_callback_query
from src.messaging.telegram.client import TelegramClient, TelegramClientError
from src.messaging.telegram.models import TelegramUpdate
from src.messaging.telegram.utils.config import TelegramConfig, get_telegram_settings
from src.observability.sentry import init_sentry
from src.paths import ENV_FILE
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)

ERROR_ANSWER_TEXT = "Something went wrong, please try again."


class PollingRunner:
    """Poll Telegram for acknowledgment button presses until stopped.

    Every batch of updates is handled, then the persisted cursor is moved
    past it. Failed polls are retried after a short delay, and after too
    many failures in a row the runner backs off for longer.
    """

    def __init__(
        self,
        client: TelegramClient | None = None,
        settings: TelegramConfig | None = None,
        session_factory: SessionFactory = get_session,
    ) -> None:
        """Initialise the polling runner.

        :param client: Telegram client. If not provided, creates one from settings.
        :param settings: Telegram settings. If not provided, loads from env.
        :param session_factory: Transactional session scope for the cursor.
        """
        self._settings = settings or get_telegram_settings()
        self._client = client or TelegramClient(
            bot_token=self._settings.bot_token,
            poll_timeout=self._settings.poll_timeout,
            request_timeout=self._settings.request_timeout,
        )
        self._session_factory = session_factory
        self._running = False
        self._consecutive_errors = 0

    def run(self) -> None:
        """Poll until a shutdown signal is received."""
        self._running = True
        self._setup_signal_handlers()
        logger.info(f"Starting acknowledgment bot: poll_timeout={self._settings.poll_timeout}s")

        try:
            offset = self._load_offset()
            logger.info(f"Polling from offset={offset}")
            while self._running:
                offset = self.poll_once(offset)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Acknowledgment bot stopped")

    def stop(self) -> None:
        """Stop after the current poll."""
        logger.info("Stopping acknowledgment bot...")
        self._running = False

    def _setup_signal_handlers(self) -> None:
        def signal_handler(signum: int, frame: FrameType | None) -> None:
            logger.info(f"Received signal {signum}, initiating shutdown")
            self.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def _load_offset(self) -> int | None:
        with self._session_factory() as db_session:
            return get_or_create_polling_cursor(db_session).next_offset

    def poll_once(self, offset: int | None) -> int | None:
        """Fetch and handle one batch of updates.

        :param offset: Offset to request from Telegram.
        :returns: Offset for the next poll.
        """
        try:
            updates = self._client.get_updates(offset=offset)
        except TelegramClientError as e:
            self._handle_polling_error(e)
            return offset

        self._consecutive_errors = 0
        if not updates:
            return offset

        for update in updates:
            self._process_update(update)

        last_update_id = max(u.update_id for u in updates)
        with self._session_factory() as db_session:
            advance_polling_cursor(db_session, last_update_id)
        return last_update_id + 1

    def _process_update(self, update: TelegramUpdate) -> None:
        """Handle a single update; anything but a callback query is skipped."""
        callback_query = update.callback_query
        if callback_query is None:
            logger.debug(f"Skipping non-callback update: update_id={update.update_id}")
            return

        try:
            process_callback_query(self._client, callback_query)
        except Exception:
            # One bad press must not block the rest of the batch
            logger.exception(f"Error processing callback query: id={callback_query.id}")
            self._send_error_answer(callback_query.id)

    def _send_error_answer(self, callback_query_id: str) -> None:
        """Answer a callback query that could not be processed.

        :param callback_query_id: ID of the callback query.
        """
        try:
            self._client.answer_callback_query(callback_query_id, text=ERROR_ANSWER_TEXT)
        except TelegramClientError:
            logger.exception(f"Failed to answer callback query: id={callback_query_id}")

    def _handle_polling_error(self, error: TelegramClientError) -> None:
        self._consecutive_errors += 1
        logger.warning(f"Polling error (consecutive: {self._consecutive_errors}): {error}")

        if self._consecutive_errors >= self._settings.max_consecutive_errors:
            logger.error(
                f"{self._consecutive_errors} consecutive polling errors, "
                f"backing off for {self._settings.backoff_delay}s"
            )
            time.sleep(self._settings.backoff_delay)
            self._consecutive_errors = 0
        else:
            time.sleep(self._settings.error_retry_delay)


def main() -> None:
    """Entry point for the acknowledgment bot."""
    load_dotenv(ENV_FILE)
    configure_logging()
    init_sentry()
    try:
        PollingRunner().run()
    finally:
        dispose_engine()


if __name__ == "__main__":
    main()
