"""
Time helpers.

The clock is any zero-argument callable returning a timezone-aware datetime.
Services receive it by injection so expiry can be tested without sleeping.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock"""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render as ISO-8601 UTC with millisecond precision, e.g. 2025-01-01T10:00:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
