"""Logging helpers for resultspec.

Every logger lives under the ``resultspec`` namespace and carries the
correlation id of the current context. Structured fields passed through
:func:`log_with_context` end up as top level keys in
:class:`StructuredFormatter` output, so a failed fetch can be traced back to
its SQL text and result type.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from resultspec._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "resultspec"
SIMPLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(correlation_id: str | None) -> None:
    """Tag every record logged in the current context with ``correlation_id``."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


class CorrelationIDFilter(logging.Filter):
    """Copies the context correlation id onto each record."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id()  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record.

    The ``extra_fields`` mapping set by :func:`log_with_context` is merged into
    the object. Values msgspec cannot encode are written as strings.
    """

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return encode_json(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger ``resultspec.<name>``, or the package root logger.

    Names already under the package namespace are used as given.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def log_with_context(logger: logging.Logger, level: int, message: str, *args: Any, **fields: Any) -> None:
    """Log ``message % args`` with ``fields`` attached as ``record.extra_fields``.

    Nothing is built when ``level`` is disabled for ``logger``.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, *args, extra={"extra_fields": fields}, stacklevel=2)


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
) -> logging.Logger:
    """Send resultspec records to stdout, replacing any handlers set earlier.

    Args:
        level: Level name for the package root logger.
        format_style: ``"structured"`` for JSON lines, anything else for plain text.
        log_to_file: Path of a file that additionally receives JSON lines.
        extra_handlers: Handlers attached as they are.

    Returns:
        The package root logger. It no longer propagates to the root logger.
    """
    formatter = StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setFormatter(formatter)
    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)
    handlers.extend(extra_handlers or ())

    root_logger = get_logger()
    root_logger.setLevel(level.upper())
    root_logger.handlers[:] = handlers
    root_logger.propagate = False
    return root_logger
