"""Timezone-aware date/time helpers for the sharing service."""

from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%S'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Europe/Moscow')
    return ZoneInfo(tz_name)


def get_now() -> datetime:
    """Get current local wall-clock time (naive) in the configured timezone."""
    return datetime.now(get_timezone()).replace(tzinfo=None, microsecond=0)


def to_local_naive(value: datetime) -> datetime:
    """Drop tzinfo after converting an aware datetime to the configured timezone."""
    if value.tzinfo is not None:
        value = value.astimezone(get_timezone()).replace(tzinfo=None)
    return value


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime for storage and JSON output.

    Fixed width, so stored values compare correctly as text in SQL.
    """
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value) -> datetime:
    """
    Parse a stored or submitted ISO-8601 timestamp.

    Args:
        value: ISO string ('2025-01-16T10:00:00', optional offset) or datetime

    Returns:
        Naive local datetime, or None for empty input

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    return to_local_naive(parsed).replace(microsecond=0)
