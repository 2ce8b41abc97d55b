"""SQLite adapter for resultspec."""

from resultspec.adapters.sqlite.statement import SqliteConnectionParams, SqliteStatement, connect, execute

__all__ = ("SqliteConnectionParams", "SqliteStatement", "connect", "execute")
