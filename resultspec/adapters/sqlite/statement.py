"""SQLite statement handle and helpers."""

import sqlite3
import uuid
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, cast

from typing_extensions import NotRequired

from resultspec.adapters.dbapi import DBAPIStatement
from resultspec.core.result import Result
from resultspec.utils.logging import get_logger

if TYPE_CHECKING:
    from resultspec.core.config import ResultConfig

__all__ = ("SqliteConnectionParams", "SqliteStatement", "connect", "execute")

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[str | None]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteStatement(DBAPIStatement):
    """Executed statement over a :class:`sqlite3.Cursor`.

    Only :class:`sqlite3.Error` is captured as an execution error. Anything
    else raised while executing propagates.
    """

    __slots__ = ()

    driver_errors: "ClassVar[tuple[type[BaseException], ...]]" = (sqlite3.Error,)


def connect(params: "Optional[SqliteConnectionParams | dict[str, Any]]" = None) -> sqlite3.Connection:
    """Open a SQLite connection.

    A missing or ``":memory:"`` database becomes a private named in-memory
    database so no file is created on disk.
    """
    config = dict(params or {})
    if config.get("database", ":memory:") == ":memory:":
        config["database"] = f"file:memory_{uuid.uuid4().hex}?mode=memory&cache=private"
        config["uri"] = True
    elif str(config["database"]).startswith("file:") and not config.get("uri"):
        logger.debug("Database URI detected (%s) but uri=True not set, enabling URI mode", config["database"])
        config["uri"] = True
    return sqlite3.connect(**cast("dict[str, Any]", config))


def execute(
    connection: sqlite3.Connection,
    sql: str,
    parameters: "Optional[Sequence[Any] | Mapping[str, Any]]" = None,
    schema_type: "Optional[type[Any]]" = None,
    *,
    config: "Optional[ResultConfig]" = None,
) -> Result:
    """Execute ``sql`` and wrap the statement in a :class:`~resultspec.core.result.Result`.

    Example::

        with execute(connection, "SELECT id, name FROM users", schema_type=User) as result:
            users = result.get_array()
    """
    statement = SqliteStatement.execute(connection, sql, parameters)
    return Result(statement, schema_type, config=config)
