import logging

import pytest
from sqlalchemy import text

from sqd_assistant.db import MIGRATIONS, create_pool, get_connection, run_migrations
from sqd_assistant.errors import DatabaseError, PoolError


class TestMigrations:
    def test_fresh_database(self, tmp_path):
        engine = create_pool(str(tmp_path / "fresh.db"))
        try:
            assert run_migrations(engine) == [version for version, _ in MIGRATIONS]
            with get_connection(engine) as conn:
                names = {r[0] for r in conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))}
            assert "todos" in names
        finally:
            engine.dispose()

    def test_rerun_is_harmless(self, engine):
        assert run_migrations(engine) == []

    def test_existing_todos_table_is_adopted(self, tmp_path, caplog):
        engine = create_pool(str(tmp_path / "legacy.db"))
        try:
            with get_connection(engine) as conn:
                conn.execute(
                    text(
                        "CREATE TABLE todos (id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, "
                        "title TEXT NOT NULL, status TEXT NOT NULL, broker TEXT NOT NULL, "
                        "created_at TEXT NOT NULL, updated_at TEXT NOT NULL)"
                    )
                )
                conn.execute(
                    text(
                        "INSERT INTO todos (title, status, broker, created_at, updated_at) "
                        "VALUES ('old', 'pending', 'Citic', '2024-01-01 08:00:00', '2024-01-01 08:00:00')"
                    )
                )
            with caplog.at_level(logging.WARNING, logger="sqd_assistant.db"):
                assert run_migrations(engine) == [version for version, _ in MIGRATIONS]
            assert "Migration warning" not in caplog.text
            with get_connection(engine) as conn:
                indexes = {r[0] for r in conn.execute(text("SELECT name FROM sqlite_master WHERE type='index'"))}
                assert conn.execute(text("SELECT title FROM todos")).scalar() == "old"
            assert "idx_todos_broker" in indexes
        finally:
            engine.dispose()

    def test_failing_migration_logs_warning_and_continues(self, tmp_path, caplog):
        engine = create_pool(str(tmp_path / "legacy.db"))
        try:
            # no broker column, so the broker index cannot be built
            with get_connection(engine) as conn:
                conn.execute(text("CREATE TABLE todos (id INTEGER PRIMARY KEY)"))
            with caplog.at_level(logging.WARNING, logger="sqd_assistant.db"):
                assert run_migrations(engine) == ["0001_create_todos"]
            assert "Migration warning (table may already exist)" in caplog.text
            assert "broker" in caplog.text
        finally:
            engine.dispose()


class TestConnections:
    def test_driver_error_becomes_database_error(self, engine):
        with pytest.raises(DatabaseError) as err:
            with get_connection(engine) as conn:
                conn.execute(text("SELECT * FROM missing_table"))
        assert str(err.value).startswith("Database error: ")
        assert "missing_table" in str(err.value)

    def test_failed_statement_rolls_back(self, engine):
        with pytest.raises(DatabaseError):
            with get_connection(engine) as conn:
                conn.execute(
                    text(
                        "INSERT INTO todos (title, status, broker, created_at, updated_at) "
                        "VALUES ('t', 's', 'b', 'x', 'x')"
                    )
                )
                conn.execute(text("SELECT * FROM missing_table"))
        with get_connection(engine) as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM todos")).scalar() == 0

    def test_pool_exhaustion(self, tmp_path):
        engine = create_pool(str(tmp_path / "tiny.db"), pool_size=1, pool_timeout=0.1)
        held = engine.connect()
        try:
            with pytest.raises(PoolError) as err:
                with get_connection(engine):
                    pass
            assert str(err.value).startswith("Connection pool error: ")
        finally:
            held.close()
            engine.dispose()

    def test_connection_returned_after_use(self, tmp_path):
        engine = create_pool(str(tmp_path / "tiny.db"), pool_size=1, pool_timeout=0.1)
        try:
            for _ in range(3):
                with get_connection(engine) as conn:
                    assert conn.execute(text("SELECT 1")).scalar() == 1
        finally:
            engine.dispose()
