"""Type guard functions for runtime type checking in resultspec.

The schema guards accept either a class or an instance of it.
"""

from typing import TYPE_CHECKING, Any

from typing_extensions import is_typeddict

from resultspec.protocols import EventTargetProtocol, StatementProtocol
from resultspec.typing import BaseModel, DataclassProtocol, Struct, attrs_has

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "is_attrs_schema",
    "is_dataclass",
    "is_event_target_type",
    "is_msgspec_struct",
    "is_pydantic_model",
    "is_schema_type",
    "is_statement",
    "is_typed_dict",
)


def _as_class(obj: Any) -> type:
    return obj if isinstance(obj, type) else type(obj)


def is_dataclass(obj: Any) -> "TypeGuard[DataclassProtocol]":
    """Check if a value is a dataclass class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return hasattr(_as_class(obj), "__dataclass_fields__")


def is_pydantic_model(obj: Any) -> "TypeGuard[BaseModel]":
    """Check if a value is a pydantic model class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return issubclass(_as_class(obj), BaseModel)


def is_msgspec_struct(obj: Any) -> "TypeGuard[Struct]":
    """Check if a value is a msgspec struct class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return issubclass(_as_class(obj), Struct)


def is_attrs_schema(obj: Any) -> bool:
    """Check if a value is an attrs class or instance."""
    return attrs_has(_as_class(obj))


def is_typed_dict(obj: Any) -> bool:
    """Check if a value is a TypedDict class."""
    return isinstance(obj, type) and is_typeddict(obj)


def is_schema_type(obj: Any) -> bool:
    """Check if a class belongs to one of the supported schema libraries.

    Args:
        obj: Class to check.

    Returns:
        True for dataclasses, msgspec structs, pydantic models, attrs classes and TypedDicts.
    """
    if not isinstance(obj, type):
        return False
    return (
        is_typed_dict(obj)
        or is_dataclass(obj)
        or is_msgspec_struct(obj)
        or is_pydantic_model(obj)
        or is_attrs_schema(obj)
    )


def is_statement(obj: Any) -> "TypeGuard[StatementProtocol]":
    """Check if a value satisfies the statement handle contract.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, StatementProtocol)


def is_event_target_type(obj: Any) -> bool:
    """Check if instances of a class accept lifecycle notifications."""
    return isinstance(obj, type) and issubclass(obj, EventTargetProtocol)
