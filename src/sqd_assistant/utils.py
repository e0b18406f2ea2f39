from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Tuple

from .errors import DatabaseError
from .models import DATE_FORMAT, TIMESTAMP_FORMAT


# PUBLIC_INTERFACE
def local_timestamp() -> str:
    """Current local time as 'YYYY-MM-DD HH:MM:SS', the format stored on todos."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


# PUBLIC_INTERFACE
def timestamp_date(value: str) -> date:
    """
    Calendar day of a stored timestamp.

    Only the leading 'YYYY-MM-DD' is read, so a 'T' separator or fractional
    seconds are accepted. Anything else raises DatabaseError, since the value
    came out of the store.
    """
    try:
        return datetime.strptime(value[:10], DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise DatabaseError(f"unreadable timestamp {value!r}") from e


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def dates_between(start: date, end: date) -> List[date]:
    """Every day from start to end, both included."""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def last_n_days(days: int, today: date) -> Tuple[date, date]:
    """Range covering the last `days` days, today included."""
    return today - timedelta(days=days - 1), today


def this_week(today: date) -> Tuple[date, date]:
    """Monday..Sunday of the week containing today."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)
