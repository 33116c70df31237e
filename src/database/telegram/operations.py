"""Database operations for the acknowledgment bot's polling position."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from src.database.telegram.models import POLLING_CURSOR_ID, TelegramPollingCursor

logger = logging.getLogger(__name__)


def get_or_create_polling_cursor(session: Session) -> TelegramPollingCursor:
    """Load the single polling cursor row, creating it at zero if absent.

    :param session: Database session.
    :returns: The polling cursor.
    """
    cursor = session.get(TelegramPollingCursor, POLLING_CURSOR_ID)
    if cursor is None:
        cursor = TelegramPollingCursor(id=POLLING_CURSOR_ID, last_update_id=0)
        session.add(cursor)
        session.flush()
        logger.info("Created polling cursor")
    return cursor


def advance_polling_cursor(
    session: Session,
    last_update_id: int,
    now: datetime | None = None,
) -> TelegramPollingCursor:
    """Move the cursor forward to ``last_update_id``.

    The cursor never moves backwards; an older id leaves it unchanged.

    :param session: Database session.
    :param last_update_id: Highest update_id that was handled.
    :param now: Current time (defaults to now).
    :returns: The cursor.
    """
    cursor = get_or_create_polling_cursor(session)
    if last_update_id <= cursor.last_update_id:
        logger.debug(
            f"Ignoring stale cursor position {last_update_id} <= {cursor.last_update_id}"
        )
        return cursor

    cursor.last_update_id = last_update_id
    cursor.updated_at = now or datetime.now(UTC)
    session.flush()
    logger.debug(f"Advanced polling cursor: last_update_id={last_update_id}")
    return cursor
