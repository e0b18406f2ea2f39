"""
Named commands invoked by the UI.

Each command takes the process ``AppState`` and returns plain data; errors
are ``AppError`` subclasses whose ``str()`` is the message shown to the user.
The HTTP bridge in ``routers`` is a thin wrapper over these functions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.engine import Engine

from .db import open_database
from .errors import ValidationError
from .logging_setup import TRACE
from .models import TodoEntity
from .reports import REPORT_FORMATS, render
from .repositories import get_repository
from .services.broker_service import BrokerService
from .services.stats_service import Stats, StatsService
from .services.todo_service import TodoService
from .settings import Settings
from .utils import local_timestamp

logger = logging.getLogger(__name__)
frontend_logger = logging.getLogger("frontend")

_FRONTEND_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@dataclass
class AppState:
    """Everything the commands need, built once at startup."""

    settings: Settings
    engine: Engine
    todos: TodoService
    brokers: BrokerService
    stats: StatsService

    def close(self) -> None:
        self.engine.dispose()


# PUBLIC_INTERFACE
def open_state(settings: Settings) -> AppState:
    """Open the database pool, run migrations and wire the services."""
    logger.info("Database path: %s", settings.database_path)
    engine = open_database(
        settings.database_path,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    repository = get_repository(engine)
    return AppState(
        settings=settings,
        engine=engine,
        todos=TodoService(repository),
        brokers=BrokerService(repository),
        stats=StatsService(repository),
    )


def create_todo(state: AppState, title: str, status: str, broker: str) -> TodoEntity:
    return state.todos.create(title, status, broker)


def get_todos(state: AppState) -> List[TodoEntity]:
    return state.todos.get_all()


def get_todo(state: AppState, todo_id: int) -> TodoEntity:
    return state.todos.get_one(todo_id)


def update_todo(
    state: AppState,
    todo_id: int,
    title: Optional[str] = None,
    status: Optional[str] = None,
    broker: Optional[str] = None,
) -> TodoEntity:
    return state.todos.update(todo_id, title=title, status=status, broker=broker)


def delete_todo(state: AppState, todo_id: int) -> None:
    state.todos.delete(todo_id)


def search_todos(state: AppState, query: str) -> List[TodoEntity]:
    return state.todos.search(query)


def get_broker_pool(state: AppState) -> List[str]:
    return state.brokers.get_pool()


def get_stats(state: AppState, start: Optional[str] = None, end: Optional[str] = None) -> Stats:
    return state.stats.stats(start, end)


def export_report(
    state: AppState,
    range_kind: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    fmt: str = "markdown",
) -> str:
    """Render the completed-work report for a daily, weekly or custom range."""
    if fmt not in REPORT_FORMATS:
        raise ValidationError(f"report format must be one of: {', '.join(REPORT_FORMATS)}")
    report = state.stats.completed_report(range_kind, start, end)
    return render(report, fmt, local_timestamp())


# PUBLIC_INTERFACE
def log_from_frontend(level: str, message: str, context: Optional[str] = None) -> None:
    """
    Write a UI log line to the application log under the 'frontend' logger.

    error/warn/info/debug keep their level; anything else is logged at TRACE.
    """
    ctx = context or ""
    log_level = _FRONTEND_LEVELS.get(level.strip().lower(), TRACE)
    line = f"[{ctx}] {message}" if ctx else message
    frontend_logger.log(log_level, line, extra={"context": ctx})
