"""UTC timestamps for storage, local dates for quote validity."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

DEFAULT_BUSINESS_TZ = "America/Sao_Paulo"


def now_utc() -> datetime:
    """
    Current time in UTC.

    Every created_at/updated_at stamp on a quote comes from here.
    """
    return datetime.now(timezone.utc)


def today_in(tz_name: str = DEFAULT_BUSINESS_TZ) -> date:
    """
    Calendar date in the business timezone.

    Quote validity is a plain date the client reads, so it follows the
    operator's wall clock rather than UTC.
    """
    try:
        tz = ZoneInfo(tz_name)
    except KeyError:
        raise ValueError(f"Unknown timezone: {tz_name}")
    return now_utc().astimezone(tz).date()


def days_from_today(days: int, tz_name: str = DEFAULT_BUSINESS_TZ) -> date:
    """Date `days` calendar days after today in the business timezone."""
    if days < 0:
        raise ValueError("days must be non-negative")
    return today_in(tz_name) + timedelta(days=days)
