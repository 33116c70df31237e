"""Base classes for reminder delivery channels.

Provides an abstract delivery interface so the scheduler can send
reminders without knowing which messaging platform carries them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class DeliveryError(Exception):
    """Raised when a reminder could not be delivered."""


@dataclass(frozen=True)
class AckAffordance:
    """What an acknowledgment of a delivered reminder must carry back.

    :param reminder_id: The delivered reminder.
    :param cycle_token: The acknowledgment cycle the delivery belongs to.
    """

    reminder_id: int
    cycle_token: str


class ReminderDelivery(ABC):
    """Abstract base class for reminder delivery channels."""

    @abstractmethod
    def send(self, destination: int, text: str, affordance: AckAffordance) -> None:
        """Send a reminder with an acknowledgment control attached.

        :param destination: Platform-specific destination handle (e.g. chat ID).
        :param text: Reminder text.
        :param affordance: Data the acknowledgment control must carry.
        :raises DeliveryError: If the reminder could not be delivered.
        """
        ...
