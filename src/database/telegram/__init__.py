"""Persistence of the acknowledgment bot's Telegram polling position."""

from src.database.telegram.models import POLLING_CURSOR_ID, TelegramPollingCursor
from src.database.telegram.operations import advance_polling_cursor, get_or_create_polling_cursor

__all__ = [
    "POLLING_CURSOR_ID",
    "TelegramPollingCursor",
    "advance_polling_cursor",
    "get_or_create_polling_cursor",
]
