"""Database models and operations for user reminders."""

from src.database.reminders.models import Reminder
from src.database.reminders.operations import (
    DEFAULT_DUE_BATCH_SIZE,
    create_reminder,
    delete_reminder,
    get_due_reminders,
    get_reminder_for_owner,
    list_reminders_for_owner,
    save_reminders,
    set_reminder_enabled,
)

__all__ = [
    "DEFAULT_DUE_BATCH_SIZE",
    # Models
    "Reminder",
    # Operations
    "create_reminder",
    "delete_reminder",
    "get_due_reminders",
    "get_reminder_for_owner",
    "list_reminders_for_owner",
    "save_reminders",
    "set_reminder_enabled",
]
