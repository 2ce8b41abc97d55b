from typing import Any, Optional

__all__ = (
    "ExecutionFailedError",
    "ImproperConfigurationError",
    "ResultSpecError",
    "SchemaConversionError",
)


class ResultSpecError(Exception):
    """Base exception class from which all resultspec exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``ResultSpecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ExecutionFailedError(ResultSpecError):
    """Raised when a result accessor is used on a failed or invalid statement."""

    detail = "Result is not success!"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(detail=message or self.detail)


class ImproperConfigurationError(ResultSpecError):
    """Improper Configuration error.

    Raised when a configuration object is given values it cannot work with.
    """


class SchemaConversionError(ResultSpecError):
    """Raised when row data cannot be converted to the requested schema type."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues converting row data to schema type."
        super().__init__(message)
