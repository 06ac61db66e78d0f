"""Timezone-aware date/time helpers.

Instants are handled as aware UTC datetimes in Python and stored as UTC
text in SQLite.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from flask import current_app

DB_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_timezone() -> ZoneInfo:
    """Get the configured calendar timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'UTC')
    return ZoneInfo(tz_name)


def get_now() -> datetime:
    """Get the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO 8601 string into an aware UTC datetime.

    Naive values are interpreted in the configured timezone.

    Raises:
        ValueError: If the value is not ISO 8601
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError('empty datetime')
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=get_timezone())
    return parsed.astimezone(timezone.utc)


def to_db(value: datetime) -> str:
    """Format an aware datetime as stored UTC text."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(DB_FORMAT)


def from_db(value: str) -> datetime | None:
    """Parse stored UTC text back into an aware datetime."""
    if not value:
        return None
    return datetime.strptime(value[:19], DB_FORMAT).replace(tzinfo=timezone.utc)


def to_iso(value: str | None) -> str | None:
    """Render stored UTC text as ISO 8601 with a Z suffix."""
    parsed = from_db(value)
    if parsed is None:
        return None
    return parsed.strftime('%Y-%m-%dT%H:%M:%SZ')


def coerce_datetime(value) -> datetime:
    """
    Accept an ISO string or a datetime and return an aware UTC datetime.

    Raises:
        ValueError: If the value cannot be interpreted as an instant
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=get_timezone())
        return value.astimezone(timezone.utc)
    if isinstance(value, str):
        return parse_iso_datetime(value)
    raise ValueError(f'not a datetime: {value!r}')


def local_day_bounds(day: date) -> tuple:
    """Return the UTC [start, end) instants of a calendar day in the configured timezone."""
    tz = get_timezone()
    start = datetime(day.year, day.month, day.day, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
