"""Result handle over an executed statement.

:class:`Result` wraps one executed statement handle and turns its rows into
one of three shapes:

- ``RAW_MAPPING``: the row mapping exactly as the statement returned it.
- ``PLAIN_RECORD``: a bare instance of the target class with one attribute
  assigned per column.
- ``MODEL_RECORD``: a domain model seeded from the row at construction.

Instances that accept lifecycle notifications receive
:attr:`~resultspec.events.ModelEvents.AFTER_QUERY` once, after construction and
before they are returned.

The statement cursor is shared by every accessor. Reading all rows, for
example through :meth:`Result.get_row_count`, leaves nothing for a later
:meth:`Result.get_array` unless the statement itself can rewind.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from mypy_extensions import mypyc_attr

from resultspec.core.config import ResultConfig
from resultspec.events import AfterQueryEventParam, ModelEvents
from resultspec.exceptions import ExecutionFailedError
from resultspec.factory import get_object_class, is_model_type, new_instance
from resultspec.protocols import FetchMode
from resultspec.typing import T
from resultspec.utils.logging import get_logger, log_with_context
from resultspec.utils.type_guards import is_event_target_type, is_statement

if TYPE_CHECKING:
    from types import TracebackType

    from resultspec.protocols import StatementProtocol

__all__ = ("MaterializationKind", "Result", "resolve_materialization")

logger = get_logger("core.result")


class MaterializationKind(str, Enum):
    """How a row is turned into the value handed back to the caller."""

    RAW_MAPPING = "raw_mapping"
    PLAIN_RECORD = "plain_record"
    MODEL_RECORD = "model_record"


def _build_raw_mapping(row: "Mapping[str, Any]", schema_type: Any) -> Any:
    return row


def _build_plain_record(row: "Mapping[str, Any]", schema_type: Any) -> Any:
    obj = new_instance(schema_type)
    for column, value in row.items():
        setattr(obj, column, value)
    return obj


def _build_model_record(row: "Mapping[str, Any]", schema_type: Any) -> Any:
    return new_instance(schema_type, row)


_BUILDERS: "dict[MaterializationKind, Callable[[Mapping[str, Any], Any], Any]]" = {
    MaterializationKind.RAW_MAPPING: _build_raw_mapping,
    MaterializationKind.PLAIN_RECORD: _build_plain_record,
    MaterializationKind.MODEL_RECORD: _build_model_record,
}


def _notify_after_query(obj: Any) -> None:
    type(obj).trigger(
        obj,
        ModelEvents.AFTER_QUERY,
        {"model": obj, "model_class": get_object_class(obj)},
        obj,
        AfterQueryEventParam,
    )


@dataclass(slots=True, frozen=True)
class _MaterializationPlan:
    kind: MaterializationKind
    schema_type: "Optional[type[Any]]"
    notify: bool

    def build(self, row: "Mapping[str, Any]") -> Any:
        obj = _BUILDERS[self.kind](row, self.schema_type)
        if self.notify:
            _notify_after_query(obj)
        return obj


def resolve_materialization(
    schema_type: "Optional[type[Any]]", enable_events: bool = True
) -> "_MaterializationPlan":
    """Classify ``schema_type`` once so rows can be built without re-inspecting it.

    Args:
        schema_type: Target class, or None for raw mappings.
        enable_events: Whether notification-capable instances get the after-query event.

    Returns:
        The plan used to build every row of a fetch.
    """
    if schema_type is None:
        return _MaterializationPlan(MaterializationKind.RAW_MAPPING, None, notify=False)
    kind = MaterializationKind.MODEL_RECORD if is_model_type(schema_type) else MaterializationKind.PLAIN_RECORD
    return _MaterializationPlan(kind, schema_type, notify=enable_events and is_event_target_type(schema_type))


@mypyc_attr(allow_interpreted_subclasses=True)
class Result:
    """Materializes the rows of one executed statement.

    Args:
        statement: The executed statement handle. Anything that does not satisfy
            :class:`~resultspec.protocols.StatementProtocol` yields a failed result.
        schema_type: Default target class for :meth:`get` and :meth:`get_array`.
            Overrides ``config.schema_type``.
        config: Materialization settings.

    Every accessor except :meth:`get_sql` and :meth:`get_statement` raises
    :class:`~resultspec.exceptions.ExecutionFailedError` on a failed result.
    ``None`` from a fetch means the statement succeeded but produced no row.
    """

    __slots__ = ("_is_success", "config", "schema_type", "statement")

    def __init__(
        self,
        statement: Any,
        schema_type: "Optional[type[Any]]" = None,
        *,
        config: "Optional[ResultConfig]" = None,
    ) -> None:
        self.config = config.copy() if config is not None else ResultConfig()
        self.schema_type = schema_type if schema_type is not None else self.config.schema_type
        self.statement: "Optional[StatementProtocol]"
        if is_statement(statement):
            self.statement = statement
            error = statement.error_info()
            self._is_success = error == ""
            if not self._is_success:
                log_with_context(
                    logger, logging.DEBUG, "Result created from failed statement: %s", error, sql=statement.get_sql()
                )
        else:
            self.statement = None
            self._is_success = False
            log_with_context(
                logger, logging.DEBUG, "Result created from %s, which is not a statement handle", type(statement).__name__
            )

    def __enter__(self) -> "Result":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        schema_name = self.schema_type.__name__ if self.schema_type is not None else None
        return f"{type(self).__name__}(is_success={self._is_success}, schema_type={schema_name})"

    def close(self) -> None:
        """Release the statement reference.

        The statement's own ``close()`` is called as well when
        ``config.close_statement`` is set. Calling this more than once is safe.
        """
        statement, self.statement = self.statement, None
        if statement is None or not self.config.close_statement:
            return
        close = getattr(statement, "close", None)
        if callable(close):
            close()

    def _ensure_success(self) -> "StatementProtocol":
        if not self._is_success:
            raise ExecutionFailedError
        if self.statement is None:
            msg = "Result has been closed"
            raise ExecutionFailedError(msg)
        return self.statement

    def is_success(self) -> bool:
        """Check if the statement executed without error.

        Returns:
            True if the statement reported an empty error string.
        """
        return self._is_success

    def get_last_insert_id(self) -> "Optional[str]":
        """Get the identifier generated by the last insert, exactly as the statement reports it."""
        return self._ensure_success().last_insert_id()

    def get_affected_rows(self) -> int:
        """Get the number of rows the statement affected."""
        return self._ensure_success().row_count()

    @overload
    def get(self, schema_type: None = None) -> Any: ...
    @overload
    def get(self, schema_type: "type[T]") -> "Optional[T]": ...

    def get(self, schema_type: "Optional[type[Any]]" = None) -> Any:
        """Fetch the next row.

        Args:
            schema_type: Target class. Falls back to the default schema type;
                with neither, the raw row mapping is returned.

        Returns:
            The materialized row, or None when no rows remain.
        """
        statement = self._ensure_success()
        row = statement.fetch()
        if row is None:
            return None
        return self._resolve(schema_type).build(row)

    @overload
    def get_array(self, schema_type: None = None) -> "Optional[list[Any]]": ...
    @overload
    def get_array(self, schema_type: "type[T]") -> "Optional[list[T]]": ...

    def get_array(self, schema_type: "Optional[type[Any]]" = None) -> "Optional[list[Any]]":
        """Fetch every remaining row.

        Rows keep the order the statement returned them in.

        Args:
            schema_type: Target class, resolved as in :meth:`get`.

        Returns:
            The materialized rows, or None when the statement could not read them.
        """
        statement = self._ensure_success()
        rows = statement.fetch_all()
        if rows is None:
            return None
        plan = self._resolve(schema_type)
        if plan.kind is MaterializationKind.RAW_MAPPING:
            return rows if isinstance(rows, list) else list(rows)
        log_with_context(
            logger,
            logging.DEBUG,
            "Materializing %d row(s) as %s",
            len(rows),
            plan.kind.value,
            schema_type=plan.schema_type.__name__ if plan.schema_type is not None else None,
            sql=statement.get_sql(),
        )
        return [plan.build(row) for row in rows]

    def get_column(self, column: "Union[int, str]" = 0) -> "Optional[list[Any]]":
        """Fetch one column of every remaining row.

        Args:
            column: Column ordinal, or column name. A missing name yields None
                for that row. Decimal digit strings such as ``"1"`` are read as ordinals.

        Returns:
            The column values in row order, or None when the statement could not
            read the rows.
        """
        statement = self._ensure_success()
        if isinstance(column, str) and column.isdecimal():
            column = int(column)
        if isinstance(column, int) and not isinstance(column, bool):
            values = statement.fetch_all(FetchMode.COLUMN, column)
            return None if values is None else list(values)
        rows = statement.fetch_all()
        if rows is None:
            return None
        return [row.get(column) for row in rows]

    def get_scalar(self, column_key: "Union[int, str]" = 0) -> Any:
        """Fetch the first column of the next row.

        ``column_key`` is accepted for API compatibility only. The value always
        comes from the first column.

        Returns:
            The value, or None when no rows remain.
        """
        return self._ensure_success().fetch_column()

    def get_row_count(self) -> int:
        """Count the remaining rows.

        This reads every remaining row, so the cursor is exhausted afterwards.
        """
        rows = self._ensure_success().fetch_all()
        return 0 if rows is None else len(rows)

    def get_sql(self) -> str:
        """Get the executed SQL text. Available on failed results too."""
        if self.statement is None:
            return ""
        return self.statement.get_sql()

    def get_statement(self) -> "Optional[StatementProtocol]":
        """Get the wrapped statement, or None once released."""
        return self.statement

    def _resolve(self, schema_type: "Optional[type[Any]]") -> "_MaterializationPlan":
        return resolve_materialization(
            schema_type if schema_type is not None else self.schema_type, self.config.enable_events
        )
