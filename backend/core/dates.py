"""
UTC date helpers.

Activities are bucketed by UTC calendar day; challenge start and end
dates are date-only values. These helpers keep both representations
consistent regardless of what the database driver hands back.

Dependencies: datetime (stdlib)
System role: Shared date arithmetic for scoring, streaks and leaderboards
"""

from datetime import date, datetime, time, timedelta, timezone

from backend.core.exceptions import ValidationError

DAY = timedelta(days=1)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day(value: datetime) -> date:
    """Calendar day of `value` in UTC."""
    return as_utc(value).date()


def day_start(day: date) -> datetime:
    """UTC midnight at the start of `day`."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def day_bounds(value: datetime) -> tuple[datetime, datetime]:
    """Half-open [start, end) UTC range of the day containing `value`."""
    start = day_start(utc_day(value))
    return start, start + DAY


def format_date_only(value: date | datetime) -> str:
    """Format as YYYY-MM-DD (UTC day for datetimes)."""
    if isinstance(value, datetime):
        value = utc_day(value)
    return value.isoformat()


def parse_date_only(value: str | date, field: str = "date") -> date:
    """
    Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        ValidationError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return utc_day(value)
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip()[:10])
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)


def parse_logged_date(value: str | date | datetime) -> datetime:
    """
    Parse an activity timestamp.

    Accepts ISO-8601 datetimes (with or without offset, trailing 'Z'
    allowed) and bare dates, which map to UTC midnight.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return day_start(value)
    text = value.strip() if isinstance(value, str) else ""
    if len(text) == 10:
        return day_start(parse_date_only(text, field="logged_date"))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"Invalid logged_date: {value!r}", field="logged_date")
