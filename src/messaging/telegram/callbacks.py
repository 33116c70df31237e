"""Callback handlers for reminder acknowledgment buttons."""

import logging
from datetime import UTC, datetime, timedelta, timezone

from src.database.connection import SessionFactory, get_session
from src.messaging.telegram.client import TelegramClient, TelegramClientError
from src.messaging.telegram.delivery import ACK_CALLBACK_PREFIX
from src.messaging.telegram.models import CallbackQuery
from src.reminders.ack import AckOutcome, acknowledge
from src.reminders.offsets import format_utc_offset

logger = logging.getLogger(__name__)

# Number of parts in ack payload (reminder_id:cycle_token)
ACK_PAYLOAD_PARTS = 2

ACK_ANSWER_TEXTS = {
    AckOutcome.NOT_FOUND: "Reminder not found.",
    AckOutcome.STALE_CYCLE: "This confirmation is no longer current.",
}


class CallbackResult:
    """Result of handling a callback query."""

    def __init__(
        self,
        answer_text: str,
        show_alert: bool = False,
        remove_keyboard: bool = False,
    ) -> None:
        """Initialise callback result.

        :param answer_text: Text to show in toast/alert.
        :param show_alert: Whether to show as alert instead of toast.
        :param remove_keyboard: Whether to remove the message's inline keyboard.
        """
        self.answer_text = answer_text
        self.show_alert = show_alert
        self.remove_keyboard = remove_keyboard


def parse_ack_callback(data: str) -> tuple[int, str] | None:
    """Parse acknowledgment callback data.

    Format: ``ack:<reminder_id>:<cycle_token>``

    :param data: Callback data string.
    :returns: Tuple of (reminder_id, cycle_token) or None if invalid.
    """
    if not data.startswith(ACK_CALLBACK_PREFIX):
        return None

    parts = [part.strip() for part in data[len(ACK_CALLBACK_PREFIX) :].split(":", 1)]
    if len(parts) != ACK_PAYLOAD_PARTS or not parts[1]:
        logger.warning(f"Invalid ack callback data: {data}")
        return None

    try:
        reminder_id = int(parts[0])
    except ValueError:
        logger.warning(f"Invalid reminder id in ack callback: {data}")
        return None

    return reminder_id, parts[1]


def format_local_time(value: datetime, utc_offset: timedelta) -> str:
    """Render a UTC instant in the owner's local time, e.g. ``2024-01-02 09:30 (UTC+03:00)``."""
    local = value.astimezone(timezone(utc_offset))
    return f"{local:%Y-%m-%d %H:%M} ({format_utc_offset(utc_offset)})"


def handle_ack_callback(
    data: str,
    user_id: int,
    now: datetime | None = None,
    session_factory: SessionFactory = get_session,
) -> CallbackResult:
    """Handle an acknowledgment button press.

    :param data: Callback data string from the button.
    :param user_id: Telegram user who pressed the button.
    :param now: Current time (defaults to now).
    :param session_factory: Transactional session scope.
    :returns: CallbackResult with response information.
    """
    parsed = parse_ack_callback(data)
    if parsed is None:
        return CallbackResult(answer_text="Invalid callback data", show_alert=True)

    reminder_id, cycle_token = parsed
    if now is None:
        now = datetime.now(UTC)

    with session_factory() as session:
        result = acknowledge(session, reminder_id, cycle_token, user_id, now)

    if not result.accepted or result.next_fire_at is None:
        return CallbackResult(answer_text=ACK_ANSWER_TEXTS[result.outcome])

    next_local = format_local_time(result.next_fire_at, result.utc_offset)
    return CallbackResult(
        answer_text=f"Done! Next reminder: {next_local}",
        remove_keyboard=True,
    )


def process_callback_query(
    client: TelegramClient,
    callback_query: CallbackQuery,
) -> None:
    """Process a callback query from Telegram.

    :param client: Telegram client for sending responses.
    :param callback_query: The callback query to process.
    """
    if not callback_query.data or not callback_query.data.startswith(ACK_CALLBACK_PREFIX):
        logger.debug(f"Ignoring callback query: id={callback_query.id}, data={callback_query.data}")
        client.answer_callback_query(callback_query.id)
        return

    result = handle_ack_callback(callback_query.data, callback_query.from_user.id)

    client.answer_callback_query(
        callback_query.id,
        text=result.answer_text,
        show_alert=result.show_alert,
    )

    if result.remove_keyboard and callback_query.message:
        try:
            client.edit_message_reply_markup(
                chat_id=callback_query.message.chat.id,
                message_id=callback_query.message.message_id,
            )
        except TelegramClientError:
            logger.warning(
                f"Could not remove keyboard from message_id={callback_query.message.message_id}"
            )
