from dataclasses import Field
from functools import lru_cache
from typing import Any, ClassVar, Protocol

from attrs import define as attrs_define
from attrs import field as attrs_field
from attrs import has as attrs_has
from msgspec import Struct, convert
from pydantic import BaseModel, TypeAdapter
from typing_extensions import TypeAlias, TypeVar


class DataclassProtocol(Protocol):
    """Protocol for instance checking dataclasses."""

    __dataclass_fields__: "ClassVar[dict[str, Field[Any]]]"


T = TypeVar("T")
SchemaT = TypeVar("SchemaT", default=dict[str, Any])
"""Type variable for the target of a schema conversion.

:class:`~resultspec.typing.SchemaT`
"""

DictRow: TypeAlias = "dict[str, Any]"
"""A single row keyed by column name."""


@lru_cache(typed=True)
def get_type_adapter(f: "type[T]") -> "TypeAdapter[T]":
    """Caches and returns a pydantic type adapter.

    Args:
        f: Type to create a type adapter for.

    Returns:
        :class:`pydantic.TypeAdapter`[:class:`typing.TypeVar`[T]]
    """
    return TypeAdapter(f)


__all__ = (
    "BaseModel",
    "DataclassProtocol",
    "DictRow",
    "SchemaT",
    "Struct",
    "T",
    "TypeAdapter",
    "attrs_define",
    "attrs_field",
    "attrs_has",
    "convert",
    "get_type_adapter",
)
