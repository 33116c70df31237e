"""Resolution of owner timezone identifiers to fixed UTC offsets."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from src.database.owners import get_owner_profile

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

UTC_PREFIX = "UTC"
MAX_OFFSET_HOURS = 14
ALLOWED_OFFSET_MINUTES = frozenset({0, 15, 30, 45})


def parse_utc_offset(timezone_id: str | None) -> timedelta:
    """Parse a stored timezone identifier such as ``UTC+03:00``.

    Anything unset or malformed resolves to a zero offset.

    :param timezone_id: Identifier stored on the owner profile.
    :returns: The fixed offset.
    """
    if not timezone_id or not timezone_id.strip():
        return timedelta(0)

    value = timezone_id.strip()
    if not value.upper().startswith(UTC_PREFIX):
        return timedelta(0)

    rest = value[len(UTC_PREFIX) :].strip()
    if not rest or rest[0] not in "+-":
        return timedelta(0)

    sign, rest = rest[0], rest[1:]
    parts = [part.strip() for part in rest.split(":", 1)]
    if len(parts) != 2 or not all(part.isdigit() for part in parts):  # noqa: PLR2004
        return timedelta(0)

    hours, minutes = int(parts[0]), int(parts[1])
    if hours > MAX_OFFSET_HOURS or minutes not in ALLOWED_OFFSET_MINUTES:
        return timedelta(0)

    offset = timedelta(hours=hours, minutes=minutes)
    if offset > timedelta(hours=MAX_OFFSET_HOURS):
        return timedelta(0)
    return -offset if sign == "-" else offset


def format_utc_offset(offset: timedelta) -> str:
    """Format an offset as ``UTC+HH:MM``."""
    sign = "-" if offset < timedelta(0) else "+"
    total_minutes = int(abs(offset).total_seconds()) // 60
    return f"{UTC_PREFIX}{sign}{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def resolve_owner_offset(session: Session, owner_id: int) -> timedelta:
    """Resolve an owner to their UTC offset.

    :param session: Database session.
    :param owner_id: Telegram user ID of the owner.
    :returns: The owner's offset, or zero if the owner is unknown.
    """
    profile = get_owner_profile(session, owner_id)
    if profile is None:
        logger.debug(f"No profile for owner_id={owner_id}, using UTC")
        return timedelta(0)
    return parse_utc_offset(profile.timezone_id)
