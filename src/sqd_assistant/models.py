from __future__ import annotations

from typing import TypedDict

# Status values used by the UI; the store accepts any string.
STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
KNOWN_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 500
BROKER_MIN_LENGTH = 1
BROKER_MAX_LENGTH = 100

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo row as read from the store.

    Fields:
    - id: Unique integer identifier assigned by the store
    - title: Trimmed title (1..500 chars)
    - status: Free-form status string
    - broker: Trimmed broker tag (1..100 chars)
    - created_at: Local creation timestamp, 'YYYY-MM-DD HH:MM:SS'
    - updated_at: Local last update timestamp, 'YYYY-MM-DD HH:MM:SS'
    """

    id: int
    title: str
    status: str
    broker: str
    created_at: str
    updated_at: str
