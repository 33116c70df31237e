"""One pass of the reminder scheduler."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from src.database.connection import SessionFactory, get_session
from src.database.owners import get_owner_profiles
from src.database.reminders import DEFAULT_DUE_BATCH_SIZE, get_due_reminders, save_reminders
from src.messaging.base import AckAffordance, ReminderDelivery
from src.reminders.ack import cycle_token_for_delivery, record_delivery
from src.reminders.schedules import ensure_utc

logger = logging.getLogger(__name__)


@dataclass
class TickStats:
    """Counts from a single scheduler tick, with one message per undelivered reminder."""

    due: int = 0
    sent: int = 0
    failed: int = 0
    postponed: int = 0
    errors: list[str] = field(default_factory=list)


class SchedulerTick:
    """Deliver every due reminder once.

    A tick runs inside a single transaction: the due batch is locked with
    ``SKIP LOCKED`` so concurrent schedulers never pick the same rows, and
    every state change made during the tick commits together.
    """

    def __init__(
        self,
        delivery: ReminderDelivery,
        escalation_interval: timedelta,
        batch_size: int = DEFAULT_DUE_BATCH_SIZE,
        session_factory: SessionFactory = get_session,
    ) -> None:
        """Initialise the tick.

        :param delivery: Channel used to send reminders.
        :param escalation_interval: Delay before re-sending an unacknowledged reminder.
        :param batch_size: Maximum number of due reminders handled per tick.
        :param session_factory: Transactional session scope.
        """
        if escalation_interval <= timedelta(0):
            raise ValueError("escalation_interval must be positive")

        self._delivery = delivery
        self._escalation_interval = escalation_interval
        self._batch_size = batch_size
        self._session_factory = session_factory

    def run(self, now: datetime | None = None) -> TickStats:
        """Run a single scheduler tick.

        :param now: Current time (defaults to now).
        :returns: Counts of what happened.
        """
        now = ensure_utc(now) if now is not None else datetime.now(UTC)
        stats = TickStats()

        with self._session_factory() as session:
            reminders = get_due_reminders(session, now=now, limit=self._batch_size)
            stats.due = len(reminders)
            if not reminders:
                logger.debug("No due reminders")
                return stats

            owners = get_owner_profiles(session, {r.owner_id for r in reminders})

            for reminder in reminders:
                owner = owners.get(reminder.owner_id)
                if owner is None or not owner.has_destination:
                    logger.warning(
                        f"No delivery destination for owner_id={reminder.owner_id}, "
                        f"postponing reminder_id={reminder.id}"
                    )
                    reminder.next_fire_at = now + self._escalation_interval
                    reminder.updated_at = now
                    stats.postponed += 1
                    stats.errors.append(f"reminder_id={reminder.id}: no delivery destination")
                    continue

                token = cycle_token_for_delivery(reminder)
                try:
                    self._delivery.send(
                        owner.chat_id,
                        reminder.display_text,
                        AckAffordance(reminder_id=reminder.id, cycle_token=token),
                    )
                except Exception as e:
                    logger.exception(f"Failed to deliver reminder_id={reminder.id}")
                    stats.failed += 1
                    stats.errors.append(f"reminder_id={reminder.id}: {e}")
                    continue

                record_delivery(reminder, token, now, self._escalation_interval)
                stats.sent += 1
                logger.debug(f"Delivered reminder_id={reminder.id} to chat_id={owner.chat_id}")

            save_reminders(session, reminders)

        logger.info(
            f"Scheduler tick complete: due={stats.due}, sent={stats.sent}, "
            f"failed={stats.failed}, postponed={stats.postponed}"
        )
        return stats
