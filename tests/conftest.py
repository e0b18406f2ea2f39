from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sqd_assistant.db import create_pool, run_migrations
from sqd_assistant.main import create_app
from sqd_assistant.models import TIMESTAMP_FORMAT
from sqd_assistant.repositories import get_repository
from sqd_assistant.services.todo_service import TodoService
from sqd_assistant.settings import Settings


class FakeClock:
    """Returns a timestamp one second later on every call."""

    def __init__(self, start: datetime = datetime(2025, 3, 10, 9, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> str:
        value = self.current.strftime(TIMESTAMP_FORMAT)
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=str(tmp_path / "data"),
        db_pool_size=4,
        db_pool_timeout=5.0,
        log_level="DEBUG",
        log_console=False,
        host="127.0.0.1",
        port=1430,
        cors_allow_origins=["tauri://localhost"],
    )


@pytest.fixture()
def engine(settings: Settings):
    engine = create_pool(settings.database_path, pool_size=settings.db_pool_size, pool_timeout=settings.db_pool_timeout)
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def repository(engine):
    return get_repository(engine)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def service(repository, clock) -> TodoService:
    return TodoService(repository, clock=clock)


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c
