"""
Timestamp helpers.

Every datetime in the domain is timezone-aware; naive values are read as UTC.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone

from .errors import InvalidTimestampError

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    if not isinstance(value, datetime):
        raise InvalidTimestampError(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: object) -> datetime:
    """
    Coerce a raw timestamp into an aware datetime.

    Accepts datetimes, dates (midnight UTC), and ISO-8601 strings including
    the trailing ``Z`` form JavaScript clients write.

    Raises:
        InvalidTimestampError: If the value cannot be interpreted.
    """
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError as e:
            raise InvalidTimestampError(value) from e
    raise InvalidTimestampError(value)
