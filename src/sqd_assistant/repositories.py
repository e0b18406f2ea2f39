from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

from sqlalchemy.engine import Engine

from .models import TodoEntity


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, title: str, status: str, broker: str, now: str) -> TodoEntity:
        """Insert a todo stamped with `now` and return the newest row."""

    @abstractmethod
    def get(self, todo_id: int) -> TodoEntity:
        """Return a TodoEntity by id. Raises TodoNotFoundError if missing."""

    @abstractmethod
    def list_all(self) -> List[TodoEntity]:
        """Return every todo ordered by id."""

    @abstractmethod
    def update(self, todo_id: int, changes: Dict[str, str], now: str) -> TodoEntity:
        """
        Apply the given column changes, always setting updated_at to `now`.
        Return the re-read row; raises TodoNotFoundError if the id is missing.
        """

    @abstractmethod
    def delete(self, todo_id: int) -> int:
        """Delete by id and return the number of rows removed (0 or 1)."""

    @abstractmethod
    def search_title(self, pattern: str) -> List[TodoEntity]:
        """Return todos whose title matches an already escaped LIKE pattern."""

    @abstractmethod
    def distinct_brokers(self) -> List[str]:
        """Return each broker value in use exactly once, unordered."""


# PUBLIC_INTERFACE
def get_repository(engine: Engine) -> Repository:
    """Return the repository bound to the given connection pool."""
    from .db import SQLiteRepository

    return SQLiteRepository(engine)
