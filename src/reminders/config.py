"""Configuration for the reminder scheduler using pydantic-settings."""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE

logger = logging.getLogger(__name__)


DEFAULT_POLL_SECONDS = 7200
DEFAULT_REPEAT_UNTIL_ACK_MINUTES = 120
DEFAULT_BATCH_SIZE = 100


class SchedulerConfig(BaseSettings):
    """Configuration for the reminder scheduler.

    Missing, non-numeric or non-positive values fall back to their defaults
    with a warning instead of failing start-up.

    :param poll_seconds: Seconds to wait between scheduler ticks.
    :param repeat_until_ack_minutes: Minutes between re-sends of an
        unacknowledged reminder.
    :param batch_size: Maximum number of due reminders handled per tick.
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    poll_seconds: int = Field(
        default=DEFAULT_POLL_SECONDS,
        validation_alias=AliasChoices("SCHEDULER_POLL_SECONDS", "poll_seconds"),
        description="Seconds between scheduler ticks",
    )
    repeat_until_ack_minutes: int = Field(
        default=DEFAULT_REPEAT_UNTIL_ACK_MINUTES,
        validation_alias=AliasChoices(
            "REPEAT_UNTIL_ACK_MINUTES",
            "SCHEDULER_REPEAT_UNTIL_ACK_MINUTES",
            "repeat_until_ack_minutes",
        ),
        description="Minutes between re-sends until acknowledged",
    )
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        validation_alias=AliasChoices("SCHEDULER_BATCH_SIZE", "batch_size"),
        description="Maximum due reminders per tick",
    )

    @field_validator("poll_seconds", "repeat_until_ack_minutes", "batch_size", mode="before")
    @classmethod
    def _positive_or_default(cls, value: Any, info: ValidationInfo) -> int:
        default = cls.model_fields[info.field_name].default
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            logger.warning(f"Invalid {info.field_name}={value!r}, using default {default}")
            return default

        if parsed <= 0:
            logger.warning(f"Non-positive {info.field_name}={parsed}, using default {default}")
            return default
        return parsed

    @property
    def poll_interval(self) -> timedelta:
        """Delay between scheduler ticks."""
        return timedelta(seconds=self.poll_seconds)

    @property
    def escalation_interval(self) -> timedelta:
        """Delay before re-sending an unacknowledged reminder."""
        return timedelta(minutes=self.repeat_until_ack_minutes)


@lru_cache
def get_scheduler_settings() -> SchedulerConfig:
    """Get cached scheduler settings.

    :returns: Configured SchedulerConfig instance.
    """
    return SchedulerConfig()
