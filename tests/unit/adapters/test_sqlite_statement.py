"""Tests for the SQLite statement adapter, run against in-memory databases."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import pytest

from resultspec.adapters.sqlite import SqliteStatement, connect, execute
from resultspec.core.config import ResultConfig
from resultspec.core.result import Result
from resultspec.events import AfterQueryEventParam, ModelEvents, listen
from resultspec.exceptions import ExecutionFailedError
from resultspec.model import Model
from resultspec.protocols import FetchMode, StatementProtocol


class User(Model):
    id: int
    name: str
    email: str


@dataclass
class UserRow:
    id: int
    name: str
    email: str


class TestSqliteStatement:
    def test_satisfies_statement_protocol(self, sqlite_connection: sqlite3.Connection) -> None:
        assert isinstance(SqliteStatement.execute(sqlite_connection, "SELECT 1"), StatementProtocol)

    def test_successful_select(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT id, name FROM users ORDER BY id")

        assert statement.error_info() == ""
        assert statement.get_sql() == "SELECT id, name FROM users ORDER BY id"
        assert statement.fetch() == {"id": 1, "name": "a"}
        assert statement.fetch_all() == [{"id": 2, "name": "b"}]
        assert statement.fetch() is None

    def test_column_mode(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT id, name FROM users ORDER BY id")

        assert statement.fetch_all(FetchMode.COLUMN, 1) == ["a", "b"]

    def test_column_mode_out_of_range(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT id FROM users")

        with pytest.raises(IndexError):
            statement.fetch_all(FetchMode.COLUMN, 3)
        with pytest.raises(IndexError):
            statement.fetch_all(FetchMode.COLUMN, -1)

    def test_fetch_column(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT count(*) AS total, 'x' FROM users")

        assert statement.fetch_column() == 2
        assert statement.fetch_column() is None

    def test_parameters(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT name FROM users WHERE id = :id", {"id": 2})

        assert statement.fetch_all() == [{"name": "b"}]
        assert statement.parameters == {"id": 2}

    def test_insert_metadata(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(
            sqlite_connection, "INSERT INTO users (name, email) VALUES (?, ?)", ("c", "c@example.com")
        )

        assert statement.last_insert_id() == "3"
        assert statement.row_count() == 1
        assert statement.fetch_all() == []
        assert statement.fetch_column() is None

    def test_errors_are_captured(self, sqlite_connection: sqlite3.Connection) -> None:
        statement = SqliteStatement.execute(sqlite_connection, "SELECT * FROM missing")

        assert "no such table: missing" in statement.error_info()
        assert "missing" in repr(statement)


class TestConnect:
    def test_memory_database_is_private(self) -> None:
        first, second = connect(), connect({"database": ":memory:"})
        try:
            first.execute("CREATE TABLE t (id INTEGER)")
            with pytest.raises(sqlite3.OperationalError):
                second.execute("SELECT * FROM t")
        finally:
            first.close()
            second.close()

    def test_file_path(self, tmp_path: Any) -> None:
        connection = connect({"database": str(tmp_path / "test.db")})
        try:
            connection.execute("CREATE TABLE t (id INTEGER)")
        finally:
            connection.close()

        assert (tmp_path / "test.db").exists()


class TestExecute:
    def test_models_in_row_order(self, sqlite_connection: sqlite3.Connection) -> None:
        events: list[AfterQueryEventParam] = []
        listen(ModelEvents.AFTER_QUERY, User)(events.append)

        sql = "SELECT id, name, email FROM users ORDER BY id DESC"
        with execute(sqlite_connection, sql, schema_type=User) as result:
            users = result.get_array()

        assert [user.id for user in users] == [2, 1]
        assert users[0].to_dict() == {"id": 2, "name": "b", "email": "b@example.com"}
        assert [event.model for event in events] == users

    def test_single_row_shapes(self, sqlite_connection: sqlite3.Connection) -> None:
        sql = "SELECT id, name, email FROM users WHERE id = ?"

        assert execute(sqlite_connection, sql, (1,)).get() == {"id": 1, "name": "a", "email": "a@example.com"}
        assert execute(sqlite_connection, sql, (1,)).get(UserRow) == UserRow(1, "a", "a@example.com")
        assert execute(sqlite_connection, sql, (3,)).get(User) is None

    def test_column_and_scalar(self, sqlite_connection: sqlite3.Connection) -> None:
        sql = "SELECT id, name FROM users ORDER BY id"

        assert execute(sqlite_connection, sql).get_column(0) == execute(sqlite_connection, sql).get_column("id")
        assert execute(sqlite_connection, sql).get_column("name") == ["a", "b"]
        assert execute(sqlite_connection, "SELECT count(*) FROM users").get_scalar() == 2
        assert execute(sqlite_connection, "SELECT id FROM users WHERE id > 10").get_scalar() is None

    def test_row_count_consumes_rows(self, sqlite_connection: sqlite3.Connection) -> None:
        result = execute(sqlite_connection, "SELECT id FROM users")

        assert result.get_row_count() == 2
        assert result.get_array() == []

    def test_insert(self, sqlite_connection: sqlite3.Connection) -> None:
        result = execute(sqlite_connection, "INSERT INTO users (name) VALUES (?)", ("c",))

        assert result.is_success() is True
        assert result.get_last_insert_id() == "3"
        assert result.get_affected_rows() == 1

    def test_failed_statement(self, sqlite_connection: sqlite3.Connection) -> None:
        result = execute(sqlite_connection, "INSERT INTO users (email) VALUES (?)", ("x",))

        assert result.is_success() is False
        assert result.get_sql() == "INSERT INTO users (email) VALUES (?)"
        with pytest.raises(ExecutionFailedError):
            result.get_affected_rows()

    def test_close_closes_cursor(self, sqlite_connection: sqlite3.Connection) -> None:
        result = execute(sqlite_connection, "SELECT id FROM users")
        statement = result.get_statement()
        result.close()

        with pytest.raises(sqlite3.ProgrammingError):
            statement.cursor.fetchall()

    def test_config_is_forwarded(self, sqlite_connection: sqlite3.Connection) -> None:
        result = execute(sqlite_connection, "SELECT id FROM users", config=ResultConfig(schema_type=UserRow))

        assert isinstance(result, Result)
        assert result.schema_type is UserRow
