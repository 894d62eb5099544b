"""
Input validation helper functions.
Parses request shapes before they reach the services.
"""

import re

from utils.datetime_helpers import parse_timestamp
from utils.exceptions import ValidationError


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def get_json_body(request) -> dict:
    """
    Return the JSON object sent with the request.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_positive_int(value, field: str) -> int:
    """
    Parse a positive integer identifier.

    Args:
        value: Raw value from JSON or query string
        field: Field name for the error message

    Returns:
        int: Parsed value

    Raises:
        ValidationError: If missing, not an integer, or not positive
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'{field} must be a positive integer', field=field)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a positive integer', field=field)
    if parsed <= 0:
        raise ValidationError(f'{field} must be a positive integer', field=field)
    return parsed


def parse_bool(value, field: str) -> bool:
    """
    Parse a boolean from JSON or a query string ('true'/'false').

    Raises:
        ValidationError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise ValidationError(f'{field} must be true or false', field=field)


def parse_booking_window(start_raw, end_raw) -> tuple:
    """
    Parse and check a booking window.

    Args:
        start_raw: ISO-8601 start timestamp
        end_raw: ISO-8601 end timestamp

    Returns:
        tuple: (start, end) naive local datetimes

    Raises:
        ValidationError: If a timestamp is missing, malformed, or start >= end
    """
    window = {}
    for field, raw in (('start', start_raw), ('end', end_raw)):
        try:
            window[field] = parse_timestamp(raw)
        except (TypeError, ValueError):
            raise ValidationError(f'{field} must be an ISO-8601 timestamp', field=field)
        if window[field] is None:
            raise ValidationError(f'{field} is required', field=field)

    if window['start'] >= window['end']:
        raise ValidationError('start must be before end', field='start')

    return window['start'], window['end']
