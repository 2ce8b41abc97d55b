"""Statement handle over a DB-API 2.0 cursor."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Optional

from typing_extensions import Self

from resultspec.protocols import FetchMode
from resultspec.typing import DictRow
from resultspec.utils.logging import get_logger, log_with_context

__all__ = ("DBAPIStatement",)

logger = get_logger("adapters.dbapi")


class DBAPIStatement:
    """Executed statement backed by any DB-API 2.0 compliant cursor.

    Rows are returned as dicts keyed by the names in ``cursor.description``.
    Errors raised by the driver while executing are captured into
    :meth:`error_info` instead of being raised, so a
    :class:`~resultspec.core.result.Result` built from the statement reports
    failure through ``is_success()``.

    This class also serves as the base class for driver specific statements.
    """

    __slots__ = ("_column_names", "_error", "cursor", "parameters", "sql")

    driver_errors: "ClassVar[tuple[type[BaseException], ...]]" = (Exception,)
    """Exceptions captured into ``error_info`` by :meth:`execute`."""

    def __init__(
        self, cursor: Any, sql: str, parameters: Any = None, error: "Optional[BaseException]" = None
    ) -> None:
        self.cursor = cursor
        self.sql = sql
        self.parameters = parameters
        self._error = "" if error is None else (str(error) or type(error).__name__)
        self._column_names: Optional[list[str]] = None

    @classmethod
    def execute(
        cls, connection: Any, sql: str, parameters: "Optional[Sequence[Any] | Mapping[str, Any]]" = None
    ) -> Self:
        """Run ``sql`` on a new cursor of ``connection``.

        Returns:
            The executed statement. Driver errors are captured, not raised.
        """
        cursor = connection.cursor()
        try:
            cursor.execute(sql, parameters if parameters is not None else ())
        except cls.driver_errors as e:
            log_with_context(logger, logging.DEBUG, "Statement failed: %s", e, sql=sql)
            return cls(cursor, sql, parameters, error=e)
        return cls(cursor, sql, parameters)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, error={self._error!r})"

    @property
    def column_names(self) -> "list[str]":
        if self._column_names is None:
            self._column_names = [column[0] for column in self.cursor.description or ()]
        return self._column_names

    def _to_mapping(self, row: "Sequence[Any]") -> "DictRow":
        return dict(zip(self.column_names, row))

    def error_info(self) -> str:
        return self._error

    def fetch(self) -> "Optional[DictRow]":
        row = self.cursor.fetchone()
        if row is None:
            return None
        return self._to_mapping(row)

    def fetch_all(self, mode: FetchMode = FetchMode.MAPPING, column: int = 0) -> "Optional[list[Any]]":
        """Fetch every remaining row.

        Args:
            mode: ``MAPPING`` for dict rows, ``COLUMN`` for the values of one column.
            column: Column ordinal read in ``COLUMN`` mode.

        Returns:
            The rows, or None when the driver failed to read them.

        Raises:
            IndexError: If ``column`` is outside the row.
        """
        if self.cursor.description is None:
            return []
        if mode is FetchMode.COLUMN and not 0 <= column < len(self.column_names):
            msg = f"Column index {column} out of range for {len(self.column_names)} column(s)"
            raise IndexError(msg)
        try:
            rows = self.cursor.fetchall()
        except self.driver_errors as e:
            log_with_context(logger, logging.WARNING, "Failed to fetch rows: %s", e, sql=self.sql)
            return None
        if mode is FetchMode.COLUMN:
            return [row[column] for row in rows]
        return [self._to_mapping(row) for row in rows]

    def fetch_column(self) -> Any:
        if self.cursor.description is None:
            return None
        row = self.cursor.fetchone()
        return None if row is None else row[0]

    def last_insert_id(self) -> "Optional[str]":
        last_row_id = getattr(self.cursor, "lastrowid", None)
        return None if last_row_id is None else str(last_row_id)

    def row_count(self) -> int:
        return self.cursor.rowcount

    def get_sql(self) -> str:
        return self.sql

    def close(self) -> None:
        self.cursor.close()
