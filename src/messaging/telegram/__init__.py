"""Telegram delivery and acknowledgment intake for reminders.

Run the acknowledgment polling bot with: python -m src.messaging.telegram
"""

from src.messaging.telegram.callbacks import (
    CallbackResult,
    handle_ack_callback,
    parse_ack_callback,
    process_callback_query,
)
from src.messaging.telegram.client import TelegramClient, TelegramClientError
from src.messaging.telegram.delivery import (
    ACK_CALLBACK_PREFIX,
    TelegramReminderDelivery,
    build_ack_keyboard,
)
from src.messaging.telegram.models import (
    CallbackQuery,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    SendMessageResult,
    TelegramChat,
    TelegramMessageInfo,
    TelegramUpdate,
    TelegramUser,
)
from src.messaging.telegram.polling import PollingRunner
from src.messaging.telegram.utils.config import TelegramConfig, get_telegram_settings

__all__ = [
    "ACK_CALLBACK_PREFIX",
    "CallbackQuery",
    "CallbackResult",
    "InlineKeyboardButton",
    "InlineKeyboardMarkup",
    "PollingRunner",
    "SendMessageResult",
    "TelegramChat",
    "TelegramClient",
    "TelegramClientError",
    "TelegramConfig",
    "TelegramMessageInfo",
    "TelegramReminderDelivery",
    "TelegramUpdate",
    "TelegramUser",
    "build_ack_keyboard",
    "get_telegram_settings",
    "handle_ack_callback",
    "parse_ack_callback",
    "process_callback_query",
]
