"""Database models and operations for reminder owners."""

from src.database.owners.models import OwnerProfile
from src.database.owners.operations import (
    get_owner_profile,
    get_owner_profiles,
    set_owner_timezone,
    upsert_owner_profile,
)

__all__ = [
    "OwnerProfile",
    "get_owner_profile",
    "get_owner_profiles",
    "set_owner_timezone",
    "upsert_owner_profile",
]
