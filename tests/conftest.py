from __future__ import annotations

from collections.abc import Generator, Mapping
from typing import Any, Callable

import pytest

from resultspec.adapters.sqlite import connect
from resultspec.events import class_listeners
from resultspec.protocols import FetchMode


class StubStatement:
    """In-memory statement handle with a single forward-only cursor."""

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        *,
        error: str = "",
        last_id: str | None = "7",
        affected: int = 3,
        sql: str = "SELECT * FROM users",
        fetch_all_fails: bool = False,
    ) -> None:
        self.rows = list(rows or [])
        self.position = 0
        self.error = error
        self.last_id = last_id
        self.affected = affected
        self.sql = sql
        self.fetch_all_fails = fetch_all_fails
        self.closed = False
        self.calls: list[str] = []

    def error_info(self) -> str:
        return self.error

    def fetch(self) -> Mapping[str, Any] | None:
        self.calls.append("fetch")
        if self.position >= len(self.rows):
            return None
        row = self.rows[self.position]
        self.position += 1
        return row

    def fetch_all(self, mode: FetchMode = FetchMode.MAPPING, column: int = 0) -> list[Any] | None:
        self.calls.append(f"fetch_all:{mode.value}:{column}")
        if self.fetch_all_fails:
            return None
        remaining = self.rows[self.position :]
        self.position = len(self.rows)
        if mode is FetchMode.COLUMN:
            return [list(row.values())[column] for row in remaining]
        return remaining

    def fetch_column(self) -> Any:
        self.calls.append("fetch_column")
        row = self.fetch()
        return None if row is None else next(iter(row.values()))

    def last_insert_id(self) -> str | None:
        return self.last_id

    def row_count(self) -> int:
        return self.affected

    def get_sql(self) -> str:
        return self.sql

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_statement() -> Callable[..., StubStatement]:
    """Factory for stub statements."""
    return StubStatement


@pytest.fixture
def user_rows() -> list[dict[str, Any]]:
    return [{"id": 2, "name": "b", "email": "b@example.com"}, {"id": 1, "name": "a", "email": "a@example.com"}]


@pytest.fixture(autouse=True)
def _reset_class_listeners() -> Generator[None, None, None]:
    yield
    class_listeners.clear()


@pytest.fixture
def sqlite_connection() -> Generator[Any, None, None]:
    """In-memory SQLite database with a seeded ``users`` table."""
    connection = connect()
    connection.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, email TEXT)")
    connection.executemany(
        "INSERT INTO users (id, name, email) VALUES (?, ?, ?)",
        [(1, "a", "a@example.com"), (2, "b", "b@example.com")],
    )
    connection.commit()
    yield connection
    connection.close()
