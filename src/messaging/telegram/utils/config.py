"""Telegram settings for reminder delivery and the acknowledgment bot."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE


class TelegramConfig(BaseSettings):
    """Telegram bot settings, read from ``TELEGRAM_*`` environment variables.

    :param bot_token: Token of the bot that sends reminders and receives acknowledgments.
    :param request_timeout: Timeout in seconds for ordinary Bot API calls.
    :param poll_timeout: Long polling timeout in seconds for getUpdates.
    :param error_retry_delay: Seconds to wait after a failed poll.
    :param max_consecutive_errors: Failed polls in a row before backing off.
    :param backoff_delay: Seconds to wait once the error limit is reached.
    """

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    bot_token: str = Field(..., min_length=1, description="Bot token from @BotFather")
    request_timeout: int = Field(
        default=30,
        ge=1,
        le=120,
        description="Bot API request timeout in seconds",
    )
    poll_timeout: int = Field(
        default=30,
        ge=1,
        le=60,
        description="Long polling timeout in seconds",
    )
    error_retry_delay: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Delay after a failed poll",
    )
    max_consecutive_errors: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Failed polls in a row before backing off",
    )
    backoff_delay: int = Field(
        default=30,
        ge=5,
        le=300,
        description="Delay once the error limit is reached",
    )


@lru_cache
def get_telegram_settings() -> TelegramConfig:
    """Get cached Telegram settings.

    :returns: Configured TelegramConfig instance.
    """
    return TelegramConfig()  # type: ignore[call-arg]
