"""Runtime-checkable protocols for the collaborators a result works with.

A result never executes SQL itself. It reads rows from a statement handle that
satisfies :class:`StatementProtocol` and notifies objects that satisfy
:class:`EventTargetProtocol`.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = ("EventTargetProtocol", "FetchMode", "StatementProtocol")


class FetchMode(str, Enum):
    """Shape of the rows returned by :meth:`StatementProtocol.fetch_all`."""

    MAPPING = "mapping"
    COLUMN = "column"


@runtime_checkable
class StatementProtocol(Protocol):
    """Protocol for an executed statement handle.

    ``fetch`` returns ``None`` when no rows remain. ``fetch_all`` returns
    ``None`` when the rows could not be read.
    """

    def error_info(self) -> str:
        """Return the execution error text, empty when the statement succeeded."""
        ...

    def fetch(self) -> "Optional[Mapping[str, Any]]":
        """Fetch the next row keyed by column name."""
        ...

    def fetch_all(self, mode: FetchMode = FetchMode.MAPPING, column: int = 0) -> "Optional[Sequence[Any]]":
        """Fetch all remaining rows, or one column of them in ``COLUMN`` mode."""
        ...

    def fetch_column(self) -> Any:
        """Fetch the first column of the next row."""
        ...

    def last_insert_id(self) -> "Optional[str]":
        """Return the identifier generated by the last insert."""
        ...

    def row_count(self) -> int:
        """Return the number of rows affected by the statement."""
        ...

    def get_sql(self) -> str:
        """Return the SQL text that was executed."""
        ...


@runtime_checkable
class EventTargetProtocol(Protocol):
    """Protocol for objects that accept lifecycle notifications."""

    def trigger(self, name: str, data: Any = None, target: Any = None, param_class: Any = None) -> Any:
        """Deliver an event to registered listeners."""
        ...
