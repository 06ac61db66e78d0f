"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime

DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


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


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is exactly in YYYY-MM-DD format and is a real calendar day.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    if not isinstance(date_str, str) or not DATE_PATTERN.match(date_str):
        return False
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except ValueError:
        return False


def validate_time_range(start: datetime, end: datetime) -> bool:
    """
    Validate that start is strictly before end.

    Args:
        start: Interval start
        end: Interval end

    Returns:
        True if start < end
    """
    if start is None or end is None:
        return False
    return start < end


def validate_space_capacity(capacity, min_capacity) -> bool:
    """
    Validate capacity >= min_capacity >= 1.

    Args:
        capacity: Maximum occupants
        min_capacity: Minimum group size

    Returns:
        True if the pair is consistent
    """
    if not isinstance(capacity, int) or not isinstance(min_capacity, int):
        return False
    if isinstance(capacity, bool) or isinstance(min_capacity, bool):
        return False
    return capacity >= min_capacity >= 1


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
