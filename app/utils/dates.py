import math
from datetime import date, datetime, timezone
from typing import Optional, Tuple, Union

DateLike = Union[datetime, date, str, None]

SECONDS_PER_DAY = 24 * 60 * 60


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """
    Parse a CRM/ticketing date value into an aware UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings (date-only or full) and epoch
    milliseconds. Returns None for anything missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None
    if text.isdigit():
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def days_until(value: DateLike, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days until ``value``, rounded up. None when the date is missing."""
    target = parse_datetime(value)
    if target is None:
        return None
    now = now or datetime.now(timezone.utc)
    return math.ceil((target - now).total_seconds() / SECONDS_PER_DAY)


def renewal_status(
    value: DateLike,
    threshold_days: int,
    now: Optional[datetime] = None,
) -> Tuple[Optional[int], Optional[bool]]:
    days = days_until(value, now)
    if days is None:
        return None, None
    return days, days <= threshold_days
