"""Database operations for reminder owner profiles."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from src.database.owners.models import OwnerProfile

logger = logging.getLogger(__name__)


def get_owner_profile(
    session: Session,
    telegram_user_id: int,
) -> OwnerProfile | None:
    """Get an owner profile by Telegram user ID.

    :param session: Database session.
    :param telegram_user_id: Telegram user ID.
    :returns: The profile or None if not found.
    """
    return (
        session.query(OwnerProfile)
        .filter(OwnerProfile.telegram_user_id == telegram_user_id)
        .one_or_none()
    )


def get_owner_profiles(
    session: Session,
    telegram_user_ids: Iterable[int],
) -> dict[int, OwnerProfile]:
    """Get owner profiles for several users in one query.

    :param session: Database session.
    :param telegram_user_ids: Telegram user IDs to look up.
    :returns: Mapping of Telegram user ID to profile. Unknown users are absent.
    """
    ids = set(telegram_user_ids)
    if not ids:
        return {}

    profiles = (
        session.query(OwnerProfile).filter(OwnerProfile.telegram_user_id.in_(ids)).all()
    )
    return {profile.telegram_user_id: profile for profile in profiles}


def upsert_owner_profile(
    session: Session,
    telegram_user_id: int,
    chat_id: int,
    now: datetime | None = None,
) -> OwnerProfile:
    """Create an owner profile or update its delivery chat.

    :param session: Database session.
    :param telegram_user_id: Telegram user ID.
    :param chat_id: Chat to deliver reminders to.
    :param now: Current time (defaults to now).
    :returns: The created or updated profile.
    """
    if now is None:
        now = datetime.now(UTC)

    profile = get_owner_profile(session, telegram_user_id)
    if profile is None:
        profile = OwnerProfile(
            telegram_user_id=telegram_user_id,
            chat_id=chat_id,
            created_at=now,
            updated_at=now,
        )
        session.add(profile)
        logger.info(f"Created owner profile: telegram_user_id={telegram_user_id}")
    else:
        profile.chat_id = chat_id
        profile.updated_at = now

    session.flush()
    return profile


def set_owner_timezone(
    session: Session,
    telegram_user_id: int,
    timezone_id: str,
    now: datetime | None = None,
) -> OwnerProfile | None:
    """Set an owner's timezone identifier.

    :param session: Database session.
    :param telegram_user_id: Telegram user ID.
    :param timezone_id: Identifier such as ``UTC+03:00``.
    :param now: Current time (defaults to now).
    :returns: The updated profile or None if not found.
    """
    if now is None:
        now = datetime.now(UTC)

    profile = get_owner_profile(session, telegram_user_id)
    if profile is None:
        return None

    profile.timezone_id = timezone_id
    profile.updated_at = now
    session.flush()
    logger.info(f"Set owner timezone: telegram_user_id={telegram_user_id}, tz={timezone_id}")
    return profile
