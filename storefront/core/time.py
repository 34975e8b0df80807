import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from storefront.core.config import APP_TZ

logger = logging.getLogger(__name__)


def get_timezone(name: str = APP_TZ) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return timezone.utc


class SystemClock:
    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz or get_timezone()

    def now(self) -> datetime:
        return datetime.now(self.tz)


def ensure_instant(value: object) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("Instant must be timezone-aware")
    return value


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Aware instant -> naive UTC, the form DateTime columns hold."""
    if value is None:
        return None
    return ensure_instant(value).astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
