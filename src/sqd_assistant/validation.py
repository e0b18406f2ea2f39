"""
Input checks shared by the services.

Everything here raises ``errors.ValidationError`` so the UI receives a
readable message instead of a driver error.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Tuple

from .errors import ValidationError
from .models import (
    BROKER_MAX_LENGTH,
    BROKER_MIN_LENGTH,
    DATE_FORMAT,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)


def _check_length(value: str, field: str, min_length: int, max_length: int) -> str:
    if value is None:
        raise ValidationError(f"{field} is required")
    s = value.strip()
    if not (min_length <= len(s) <= max_length):
        raise ValidationError(
            f"{field} length must be between {min_length} and {max_length} characters"
        )
    return s


# PUBLIC_INTERFACE
def validate_title(value: str) -> str:
    """Strip whitespace and enforce 1..500 characters. Returns the trimmed title."""
    return _check_length(value, "title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)


# PUBLIC_INTERFACE
def validate_broker(value: str) -> str:
    """Strip whitespace and enforce 1..100 characters. Returns the trimmed broker."""
    return _check_length(value, "broker", BROKER_MIN_LENGTH, BROKER_MAX_LENGTH)


# PUBLIC_INTERFACE
def validate_date_format(value: str) -> date:
    """
    Check a 'YYYY-MM-DD' date string and return it as a date.

    Year must be within 1900..2100, month 1..12, day 1..31, and the whole
    value must name a real calendar day (so '2024-02-30' is rejected).
    """
    parts = (value or "").strip().split("-")
    if len(parts) != 3:
        raise ValidationError("date must be formatted as YYYY-MM-DD")

    try:
        year, month, day = (int(p) for p in parts)
    except ValueError as e:
        raise ValidationError("year, month and day must be numbers") from e

    if not 1900 <= year <= 2100:
        raise ValidationError("year must be between 1900 and 2100")
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1 <= day <= 31:
        raise ValidationError("day must be between 1 and 31")

    try:
        return datetime.strptime(f"{year:04d}-{month:02d}-{day:02d}", DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(f"{value.strip()} is not a valid calendar date") from e


# PUBLIC_INTERFACE
def validate_date_range(start: Optional[str], end: Optional[str]) -> Optional[Tuple[date, date]]:
    """
    Validate an optional inclusive date range.

    Both bounds or neither must be given. Returns None when no range was given.
    """
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise ValidationError("start and end must be given together")
    start_date = validate_date_format(start)
    end_date = validate_date_format(end)
    if start_date > end_date:
        raise ValidationError("start must not be after end")
    return start_date, end_date


# PUBLIC_INTERFACE
def escape_like_pattern(s: str) -> str:
    """
    Escape LIKE wildcards so user input matches literally.

    Backslash is the escape character, so it is doubled first; the statement
    using the result must declare ``ESCAPE '\\'``.
    """
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
