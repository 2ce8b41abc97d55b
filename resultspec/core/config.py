"""Configuration objects for result materialization."""

import dataclasses
from dataclasses import dataclass
from typing import Any

from resultspec.exceptions import ImproperConfigurationError

__all__ = ("ResultConfig",)


@dataclass(slots=True)
class ResultConfig:
    """Controls how a :class:`~resultspec.core.result.Result` materializes rows.

    Attributes:
        schema_type: Default target class used when a fetch names none. ``None``
            returns rows as mappings.
        enable_events: Fire the after-query event on instances that accept
            lifecycle notifications.
        close_statement: Call ``close()`` on the statement when the result is
            closed, if the statement has one.
    """

    schema_type: "type[Any] | None" = None
    enable_events: bool = True
    close_statement: bool = True

    def __post_init__(self) -> None:
        if self.schema_type is not None and not isinstance(self.schema_type, type):
            msg = f"schema_type must be a class or None, got {self.schema_type!r}"
            raise ImproperConfigurationError(msg)

    def copy(self) -> "ResultConfig":
        """Return a copy to avoid sharing mutable state."""

        return ResultConfig(
            schema_type=self.schema_type, enable_events=self.enable_events, close_statement=self.close_statement
        )

    def replace(self, **changes: Any) -> "ResultConfig":
        """Return a copy with ``changes`` applied and validated."""

        return dataclasses.replace(self, **changes)
