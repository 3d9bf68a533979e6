from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from payclock.core.config import settings


def resolve_zone(tz: str | tzinfo | None = None) -> tzinfo:
    if tz is None:
        tz = settings.TIMEZONE
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def localize(instant: datetime, tz: str | tzinfo | None = None) -> datetime:
    """Attach the configured zone to a naive datetime; aware ones pass through."""
    if instant.tzinfo is not None:
        return instant
    return instant.replace(tzinfo=resolve_zone(tz))
