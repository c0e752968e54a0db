"""Date helpers."""

import calendar
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length.

    Args:
        value: Start datetime
        months: Number of months to add

    Returns:
        Shifted datetime
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def billing_month(value: datetime) -> str:
    """Format a datetime as a YYYY-MM billing month."""
    return value.strftime("%Y-%m")


def month_start(value: datetime, months_back: int = 0) -> datetime:
    """First instant of the month, optionally shifted back by whole months."""
    start = value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return add_months(start, -months_back)


def iso(value: datetime | None) -> str | None:
    """ISO 8601 string for JSON columns."""
    return value.isoformat() if value else None
