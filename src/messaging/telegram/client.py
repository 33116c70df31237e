"""Telegram Bot API client for sending messages and receiving updates."""

import logging
from typing import Any

import requests

from src.messaging.base import DeliveryError
from src.messaging.telegram.models import (
    InlineKeyboardMarkup,
    SendMessageResult,
    TelegramUpdate,
)

logger = logging.getLogger(__name__)

# Default API timeout in seconds
DEFAULT_REQUEST_TIMEOUT = 30


class TelegramClientError(DeliveryError):
    """Raised when Telegram API request fails."""


class TelegramClient:
    """Client for interacting with the Telegram Bot API.

    Supports sending messages with inline keyboards, answering callback
    queries and receiving updates via long polling.
    """

    def __init__(
        self,
        *,
        bot_token: str,
        poll_timeout: int = 30,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialise the Telegram client.

        :param bot_token: Telegram bot token from @BotFather.
        :param poll_timeout: Timeout in seconds for long polling.
        :param request_timeout: Timeout in seconds for other API calls.
        """
        self._bot_token = bot_token
        self._poll_timeout = poll_timeout
        self._request_timeout = request_timeout
        self._base_url = f"https://api.telegram.org/bot{self._bot_token}"
        logger.debug(f"TelegramClient initialised with poll_timeout={poll_timeout}s")

    def _call(
        self,
        method: str,
        payload: dict[str, Any],
        timeout: int | None = None,
    ) -> Any:
        """Call a Bot API method and return its ``result`` field.

        :param method: Bot API method name.
        :param payload: JSON payload.
        :param timeout: Request timeout in seconds. Defaults to the client's request timeout.
        :returns: The decoded ``result`` field.
        :raises TelegramClientError: If the request fails or the API reports an error.
        """
        url = f"{self._base_url}/{method}"
        if timeout is None:
            timeout = self._request_timeout

        try:
            response = requests.post(url, json=payload, timeout=timeout)
            response.raise_for_status()

            result = response.json()
            if not result.get("ok"):
                error_description = result.get("description", "Unknown error")
                raise TelegramClientError(f"Telegram API returned error: {error_description}")

            return result.get("result")

        except requests.exceptions.Timeout as e:
            raise TelegramClientError(
                f"Telegram API request timed out after {timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise TelegramClientError(f"Telegram API request failed: {e}") from e

    def send_message(
        self,
        text: str,
        chat_id: int | str,
        reply_markup: InlineKeyboardMarkup | None = None,
    ) -> SendMessageResult:
        """Send a plain text message to a chat.

        :param text: The message text to send.
        :param chat_id: Target chat ID.
        :param reply_markup: Optional inline keyboard.
        :returns: Result containing message_id and chat_id.
        :raises TelegramClientError: If the API request fails.
        """
        logger.info(f"Sending message to chat_id={chat_id}")
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup.model_dump()

        message_data = self._call("sendMessage", payload) or {}
        message_id = message_data.get("message_id")
        response_chat_id = message_data.get("chat", {}).get("id")

        logger.info(f"Message sent successfully: message_id={message_id}, chat_id={chat_id}")
        return SendMessageResult(message_id=message_id, chat_id=response_chat_id)

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: str | None = None,
        show_alert: bool = False,
    ) -> None:
        """Answer a callback query so the client stops showing a spinner.

        :param callback_query_id: ID of the callback query.
        :param text: Optional notification text.
        :param show_alert: Show an alert instead of a toast.
        :raises TelegramClientError: If the API request fails.
        """
        payload: dict[str, Any] = {
            "callback_query_id": callback_query_id,
            "show_alert": show_alert,
        }
        if text:
            payload["text"] = text

        self._call("answerCallbackQuery", payload)

    def edit_message_reply_markup(
        self,
        chat_id: int | str,
        message_id: int,
        reply_markup: InlineKeyboardMarkup | None = None,
    ) -> None:
        """Replace (or with None, remove) the inline keyboard of a message.

        :param chat_id: Chat containing the message.
        :param message_id: Message to edit.
        :param reply_markup: New keyboard, or None to remove it.
        :raises TelegramClientError: If the API request fails.
        """
        payload: dict[str, Any] = {"chat_id": chat_id, "message_id": message_id}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup.model_dump()

        self._call("editMessageReplyMarkup", payload)

    def get_updates(
        self,
        offset: int | None = None,
        timeout: int | None = None,
    ) -> list[TelegramUpdate]:
        """Get updates from Telegram using long polling.

        :param offset: Identifier of the first update to be returned.
            Should be one greater than the highest update_id received.
        :param timeout: Timeout in seconds for long polling. If not provided,
            uses the configured poll_timeout.
        :returns: List of updates from Telegram.
        :raises TelegramClientError: If the API request fails.
        """
        poll_timeout = timeout if timeout is not None else self._poll_timeout

        payload: dict[str, Any] = {
            "timeout": poll_timeout,
            "allowed_updates": ["callback_query"],
        }
        if offset is not None:
            payload["offset"] = offset

        logger.debug(f"Polling for updates: offset={offset}, timeout={poll_timeout}s")

        # Request timeout should be slightly longer than poll timeout
        # to avoid premature connection termination
        updates_data = self._call("getUpdates", payload, timeout=poll_timeout + 10) or []
        updates = [TelegramUpdate.model_validate(u) for u in updates_data]

        if updates:
            logger.debug(f"Received {len(updates)} updates")

        return updates
