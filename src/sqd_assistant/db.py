from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Generator, List, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection, Engine, RowMapping
from sqlalchemy.pool import QueuePool

from .errors import DatabaseError, PoolError, TodoNotFoundError
from .models import TIMESTAMP_FORMAT, TodoEntity
from .repositories import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    status: str = "status"
    broker: str = "broker"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()

_MIGRATIONS_TABLE = "__schema_migrations"

# Ordered (version, statements). Applied versions are recorded in _MIGRATIONS_TABLE.
MIGRATIONS: List[Tuple[str, Tuple[str, ...]]] = [
    (
        "0001_create_todos",
        (
            f"""
            CREATE TABLE IF NOT EXISTS {_COLS.table} (
                {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL,
                {_COLS.title} TEXT NOT NULL,
                {_COLS.status} TEXT NOT NULL,
                {_COLS.broker} TEXT NOT NULL,
                {_COLS.created_at} TEXT NOT NULL,
                {_COLS.updated_at} TEXT NOT NULL
            )
            """,
        ),
    ),
    (
        "0002_index_todos_broker",
        (f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_broker ON {_COLS.table}({_COLS.broker})",),
    ),
]


def _driver_message(error: sa_exc.SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


# PUBLIC_INTERFACE
def create_pool(database_path: str, pool_size: int = 10, pool_timeout: float = 30.0) -> Engine:
    """
    Create a bounded connection pool over the sqlite file at database_path.

    At most pool_size connections exist at once; a caller waiting longer than
    pool_timeout seconds for one gets a PoolError from get_connection().
    """
    os.makedirs(os.path.dirname(database_path) or ".", exist_ok=True)
    return create_engine(
        f"sqlite:///{database_path}",
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        connect_args={"check_same_thread": False},
    )


# PUBLIC_INTERFACE
@contextmanager
def get_connection(engine: Engine) -> Generator[Connection, None, None]:
    """
    Check a connection out of the pool and run the body in one transaction.

    Raises PoolError when no connection frees up in time and DatabaseError for
    any driver error; the connection goes back to the pool either way.
    """
    try:
        conn = engine.connect()
    except sa_exc.TimeoutError as e:
        raise PoolError(str(e)) from e
    except sa_exc.SQLAlchemyError as e:
        raise DatabaseError(_driver_message(e)) from e

    try:
        with conn.begin():
            yield conn
    except sa_exc.SQLAlchemyError as e:
        raise DatabaseError(_driver_message(e)) from e
    finally:
        conn.close()


# PUBLIC_INTERFACE
def run_migrations(engine: Engine) -> List[str]:
    """
    Apply pending migrations and return the versions applied.

    Schema statements use IF NOT EXISTS, so a todos table left by an earlier
    install is adopted as is. A migration that still fails (for example a
    legacy table missing a column) is logged as a warning and stops the run;
    startup goes on with the schema already in place.
    """
    applied: List[str] = []
    try:
        with get_connection(engine) as conn:
            conn.execute(
                text(
                    f"CREATE TABLE IF NOT EXISTS {_MIGRATIONS_TABLE} "
                    "(version TEXT PRIMARY KEY NOT NULL, run_on TEXT NOT NULL)"
                )
            )
            done = {row[0] for row in conn.execute(text(f"SELECT version FROM {_MIGRATIONS_TABLE}"))}

        for version, statements in MIGRATIONS:
            if version in done:
                continue
            with get_connection(engine) as conn:
                for statement in statements:
                    conn.execute(text(statement))
                conn.execute(
                    text(f"INSERT INTO {_MIGRATIONS_TABLE} (version, run_on) VALUES (:version, :run_on)"),
                    {"version": version, "run_on": datetime.now().strftime(TIMESTAMP_FORMAT)},
                )
            applied.append(version)
            logger.info("Applied migration %s", version)
    except DatabaseError as e:
        logger.warning("Migration warning (table may already exist): %s", e)
        return applied

    logger.info("Migrations applied successfully (%d new)", len(applied))
    return applied


class SQLiteRepository(Repository):
    """
    SQLite repository implementing the Repository interface over a pooled engine.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _row_to_entity(self, row: RowMapping) -> TodoEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "status": str(row[_COLS.status]),
            "broker": str(row[_COLS.broker]),
            "created_at": str(row[_COLS.created_at]),
            "updated_at": str(row[_COLS.updated_at]),
        }

    def create(self, title: str, status: str, broker: str, now: str) -> TodoEntity:
        with get_connection(self._engine) as conn:
            conn.execute(
                text(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.status}, {_COLS.broker},
                        {_COLS.created_at}, {_COLS.updated_at})
                    VALUES (:title, :status, :broker, :created_at, :updated_at)
                    """
                ),
                {"title": title, "status": status, "broker": broker, "created_at": now, "updated_at": now},
            )
            # Newest row; ids only grow and inserts are not interleaved at this scale
            row = conn.execute(
                text(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id} DESC LIMIT 1")
            ).mappings().fetchone()
            if row is None:
                raise DatabaseError("Record not found")
            return self._row_to_entity(row)

    def get(self, todo_id: int) -> TodoEntity:
        with get_connection(self._engine) as conn:
            return self._get(conn, todo_id)

    def _get(self, conn: Connection, todo_id: int) -> TodoEntity:
        row = conn.execute(
            text(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = :id"), {"id": todo_id}
        ).mappings().fetchone()
        if row is None:
            raise TodoNotFoundError(todo_id)
        return self._row_to_entity(row)

    def list_all(self) -> List[TodoEntity]:
        with get_connection(self._engine) as conn:
            rows = conn.execute(
                text(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id}")
            ).mappings().fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update(self, todo_id: int, changes: Dict[str, str], now: str) -> TodoEntity:
        allowed = {_COLS.title, _COLS.status, _COLS.broker}
        params: Dict[str, object] = {k: v for k, v in changes.items() if k in allowed}
        assignments = [f"{k} = :{k}" for k in params]
        assignments.append(f"{_COLS.updated_at} = :updated_at")
        params["updated_at"] = now
        params["id"] = todo_id

        with get_connection(self._engine) as conn:
            conn.execute(
                text(
                    f"UPDATE {_COLS.table} SET {', '.join(assignments)} WHERE {_COLS.id} = :id"
                ),
                params,
            )
            return self._get(conn, todo_id)

    def delete(self, todo_id: int) -> int:
        with get_connection(self._engine) as conn:
            result = conn.execute(
                text(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = :id"), {"id": todo_id}
            )
            return int(result.rowcount or 0)

    def search_title(self, pattern: str) -> List[TodoEntity]:
        with get_connection(self._engine) as conn:
            rows = conn.execute(
                text(
                    f"SELECT * FROM {_COLS.table} WHERE {_COLS.title} LIKE :pattern ESCAPE '\\' "
                    f"ORDER BY {_COLS.id}"
                ),
                {"pattern": pattern},
            ).mappings().fetchall()
            return [self._row_to_entity(r) for r in rows]

    def distinct_brokers(self) -> List[str]:
        with get_connection(self._engine) as conn:
            rows = conn.execute(text(f"SELECT DISTINCT {_COLS.broker} FROM {_COLS.table}")).fetchall()
            return [str(r[0]) for r in rows]


def open_database(database_path: str, pool_size: int = 10, pool_timeout: float = 30.0) -> Engine:
    """Create the pool and bring the schema up to date."""
    engine = create_pool(database_path, pool_size=pool_size, pool_timeout=pool_timeout)
    run_migrations(engine)
    return engine
