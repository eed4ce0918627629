"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months (31 Jan + 1 → 28/29 Feb)"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def utc_now() -> datetime:
    """Timezone-aware current UTC timestamp"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
