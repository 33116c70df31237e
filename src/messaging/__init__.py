"""Messaging module providing platform-agnostic delivery abstractions."""

from src.messaging.base import AckAffordance, DeliveryError, ReminderDelivery

__all__ = [
    "AckAffordance",
    "DeliveryError",
    "ReminderDelivery",
]
