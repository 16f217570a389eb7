# app/core/timeutils.py
from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from app.core.config import get_settings


@lru_cache
def display_tz() -> ZoneInfo:
    """Studio display timezone (fixed per deployment, e.g. Asia/Jakarta)."""
    return ZoneInfo(get_settings().DISPLAY_TIMEZONE)


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to a naive datetime read back from the database.

    Instants are always stored in UTC, but some drivers (SQLite) drop tzinfo.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def input_to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime coming from a request.

    Naive values are wall-clock times in the studio timezone.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=display_tz())
    return value.astimezone(timezone.utc)
