"""Todo business logic: validation, timestamps, and calls into the repository."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from ..models import TodoEntity
from ..repositories import Repository
from ..utils import local_timestamp
from ..validation import escape_like_pattern, validate_broker, validate_title

logger = logging.getLogger(__name__)


class TodoService:
    """Todo operations invoked by the UI commands."""

    def __init__(self, repository: Repository, clock: Callable[[], str] = local_timestamp) -> None:
        self.repository = repository
        self._clock = clock

    def create(self, title: str, status: str, broker: str) -> TodoEntity:
        """Validate and insert a todo; both timestamps are set to now."""
        logger.info("TodoService.create - title: %s, status: %s, broker: %s", title, status, broker)

        clean_title = validate_title(title)
        clean_broker = validate_broker(broker)

        todo = self.repository.create(clean_title, status, clean_broker, self._clock())
        logger.info("Created todo with id: %d", todo["id"])
        return todo

    def get_all(self) -> List[TodoEntity]:
        logger.info("TodoService.get_all")
        todos = self.repository.list_all()
        logger.info("Retrieved %d todos", len(todos))
        return todos

    def get_one(self, todo_id: int) -> TodoEntity:
        logger.info("TodoService.get_one - todo_id: %d", todo_id)
        return self.repository.get(todo_id)

    def update(
        self,
        todo_id: int,
        title: Optional[str] = None,
        status: Optional[str] = None,
        broker: Optional[str] = None,
    ) -> TodoEntity:
        """
        Change only the supplied fields. updated_at is refreshed even when no
        field is supplied.
        """
        logger.info("TodoService.update - todo_id: %d", todo_id)
        logger.debug("Update details - title: %r, status: %r, broker: %r", title, status, broker)

        changes: Dict[str, str] = {}
        if title is not None:
            changes["title"] = validate_title(title)
        if status is not None:
            changes["status"] = status
        if broker is not None:
            changes["broker"] = validate_broker(broker)

        todo = self.repository.update(todo_id, changes, self._clock())
        logger.info("Todo %d updated successfully", todo_id)
        return todo

    def delete(self, todo_id: int) -> None:
        """Delete by id; a missing id is not an error."""
        logger.info("TodoService.delete - todo_id: %d", todo_id)
        removed = self.repository.delete(todo_id)
        logger.info("Todo %d delete finished, %d row(s) removed", todo_id, removed)

    def search(self, query: str) -> List[TodoEntity]:
        """Literal substring match on title."""
        logger.info("TodoService.search - query: %s", query)
        pattern = f"%{escape_like_pattern(query)}%"
        todos = self.repository.search_title(pattern)
        logger.info("Search returned %d results", len(todos))
        return todos
