from __future__ import annotations


# PUBLIC_INTERFACE
class AppError(Exception):
    """
    Base class for every error surfaced to the UI.

    The UI only ever sees ``str(error)``, so each subclass formats its message
    with a stable prefix naming the error kind.
    """

    prefix = "Application error"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class ValidationError(AppError):
    """Input rejected before touching the store (length or format)."""

    prefix = "Validation error"


class DatabaseError(AppError):
    """Store/driver error, propagated with the driver's message."""

    prefix = "Database error"


class TodoNotFoundError(DatabaseError):
    """Raised when a read by id finds no row."""

    def __init__(self, todo_id: int) -> None:
        self.todo_id = todo_id
        super().__init__("Record not found")


class PoolError(AppError):
    """No pooled connection could be acquired within the timeout."""

    prefix = "Connection pool error"
