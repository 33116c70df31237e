"""Telegram implementation of reminder delivery."""

import logging

from src.messaging.base import AckAffordance, ReminderDelivery
from src.messaging.telegram.client import TelegramClient
from src.messaging.telegram.models import InlineKeyboardButton, InlineKeyboardMarkup

logger = logging.getLogger(__name__)

# Callback data prefix for acknowledgment buttons: ack:<reminder_id>:<cycle_token>
ACK_CALLBACK_PREFIX = "ack:"

ACK_BUTTON_TEXT = "✅ Done"


def build_ack_callback_data(affordance: AckAffordance) -> str:
    """Encode an acknowledgment affordance as callback data."""
    return f"{ACK_CALLBACK_PREFIX}{affordance.reminder_id}:{affordance.cycle_token}"


def build_ack_keyboard(affordance: AckAffordance) -> InlineKeyboardMarkup:
    """Build the single-button keyboard used to acknowledge a reminder.

    :param affordance: Reminder and cycle the button acknowledges.
    :returns: InlineKeyboardMarkup with the acknowledgment button.
    """
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=ACK_BUTTON_TEXT,
                    callback_data=build_ack_callback_data(affordance),
                )
            ]
        ]
    )


class TelegramReminderDelivery(ReminderDelivery):
    """Deliver reminders as Telegram messages with an acknowledgment button."""

    def __init__(self, client: TelegramClient) -> None:
        """Initialise the delivery channel.

        :param client: Telegram client used to send messages.
        """
        self._client = client

    def send(self, destination: int, text: str, affordance: AckAffordance) -> None:
        """Send a reminder to a Telegram chat.

        :param destination: Telegram chat ID.
        :param text: Reminder text.
        :param affordance: Data carried by the acknowledgment button.
        :raises TelegramClientError: If the message could not be sent.
        """
        self._client.send_message(
            text,
            chat_id=destination,
            reply_markup=build_ack_keyboard(affordance),
        )
        logger.debug(f"Delivered reminder_id={affordance.reminder_id} to chat_id={destination}")
