"""Acknowledgment cycle state machine for reminders.

A reminder is either idle (``awaiting_ack`` false, no token) or awaiting
acknowledgment under a cycle token. Delivering an idle reminder starts a
new cycle with a fresh token; re-sending keeps the token. Only an
acknowledgment carrying the active token ends the cycle, so a stale button
press from an earlier cycle can never acknowledge a newer one.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from src.database.reminders import get_reminder_for_owner
from src.reminders.offsets import resolve_owner_offset
from src.reminders.schedules import describe_schedule, ensure_utc, next_fire_or_fallback

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from src.database.reminders import Reminder

logger = logging.getLogger(__name__)

# 128-bit cycle tokens, hex encoded
CYCLE_TOKEN_BYTES = 16


class AckOutcome(StrEnum):
    """Outcome of an acknowledgment attempt."""

    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"
    STALE_CYCLE = "stale_cycle"


@dataclass(frozen=True)
class AckResult:
    """Result of :func:`acknowledge`.

    :param outcome: Whether the acknowledgment was accepted, and why not.
    :param next_fire_at: The recomputed fire instant when accepted.
    :param utc_offset: The owner's offset, for rendering local times.
    """

    outcome: AckOutcome
    next_fire_at: datetime | None = None
    utc_offset: timedelta = timedelta(0)

    @property
    def accepted(self) -> bool:
        """Whether the acknowledgment advanced the cycle."""
        return self.outcome == AckOutcome.ACCEPTED


def new_cycle_token() -> str:
    """Mint a fresh, unguessable cycle token."""
    return secrets.token_hex(CYCLE_TOKEN_BYTES)


def cycle_token_for_delivery(reminder: Reminder) -> str:
    """Return the token to attach to the next delivery of a reminder.

    Keeps the active token while the reminder is awaiting acknowledgment
    (a re-send), otherwise mints a new one. The reminder is not modified.

    :param reminder: The reminder selected for delivery.
    :returns: The cycle token.
    """
    if reminder.awaiting_ack and reminder.active_cycle_token and reminder.active_cycle_token.strip():
        return reminder.active_cycle_token
    return new_cycle_token()


def record_delivery(
    reminder: Reminder,
    cycle_token: str,
    now: datetime,
    escalation_interval: timedelta,
) -> None:
    """Apply a successful delivery to a reminder.

    Moves the reminder into (or keeps it in) the awaiting state under
    ``cycle_token`` and schedules the re-send.

    :param reminder: The delivered reminder.
    :param cycle_token: Token that was attached to the delivery.
    :param now: Delivery time.
    :param escalation_interval: Delay before re-sending if not acknowledged.
    """
    if reminder.active_cycle_token != cycle_token:
        logger.debug(f"Starting new ack cycle for reminder_id={reminder.id}")

    reminder.awaiting_ack = True
    reminder.active_cycle_token = cycle_token
    reminder.last_fired_at = now
    reminder.next_fire_at = now + escalation_interval
    reminder.updated_at = now


def apply_acknowledgement(
    reminder: Reminder,
    cycle_token: str,
    utc_offset: timedelta,
    now: datetime,
) -> AckOutcome:
    """Acknowledge a reminder if ``cycle_token`` matches its active cycle.

    On a match the cycle ends and the next fire instant is recomputed from
    the schedule anchored at ``now``. On a mismatch nothing changes.

    :param reminder: The reminder being acknowledged.
    :param cycle_token: Token carried by the acknowledgment.
    :param utc_offset: The owner's fixed UTC offset.
    :param now: Acknowledgment time.
    :returns: ACCEPTED or STALE_CYCLE.
    """
    if not reminder.awaiting_ack or not cycle_token or reminder.active_cycle_token != cycle_token:
        return AckOutcome.STALE_CYCLE

    reminder.awaiting_ack = False
    reminder.active_cycle_token = None
    reminder.last_acknowledged_at = now
    reminder.updated_at = now
    reminder.next_fire_at = next_fire_or_fallback(reminder.schedule, utc_offset, now)
    return AckOutcome.ACCEPTED


def acknowledge(
    session: Session,
    reminder_id: int,
    cycle_token: str,
    owner_id: int,
    now: datetime | None = None,
) -> AckResult:
    """Handle an acknowledgment from a reminder's owner.

    The reminder row is locked for the rest of the transaction, so an
    acknowledgment racing a scheduler tick sees the tick's committed token.

    :param session: Database session. The caller commits.
    :param reminder_id: Reminder being acknowledged.
    :param cycle_token: Token carried by the acknowledgment.
    :param owner_id: Telegram user ID of the acknowledging user.
    :param now: Current time (defaults to now).
    :returns: The outcome, with the new fire instant when accepted.
    """
    now = ensure_utc(now) if now is not None else datetime.now(UTC)

    reminder = get_reminder_for_owner(session, reminder_id, owner_id, for_update=True)
    if reminder is None:
        logger.info(f"Acknowledgment for unknown reminder_id={reminder_id}, owner_id={owner_id}")
        return AckResult(outcome=AckOutcome.NOT_FOUND)

    utc_offset = resolve_owner_offset(session, owner_id)
    outcome = apply_acknowledgement(reminder, cycle_token, utc_offset, now)

    if outcome != AckOutcome.ACCEPTED:
        logger.info(f"Rejected stale acknowledgment for reminder_id={reminder_id}")
        return AckResult(outcome=outcome, utc_offset=utc_offset)

    session.flush()
    logger.info(
        f"Acknowledged reminder_id={reminder_id} ({describe_schedule(reminder.schedule)}), "
        f"next_fire_at={reminder.next_fire_at.isoformat()}"
    )
    return AckResult(outcome=outcome, next_fire_at=reminder.next_fire_at, utc_offset=utc_offset)
