"""Conversion of a single row mapping into a schema library class."""

from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import PurePath
from typing import Any, overload

from resultspec.exceptions import SchemaConversionError
from resultspec.typing import SchemaT, convert, get_type_adapter
from resultspec.utils.logging import get_logger
from resultspec.utils.type_guards import (
    is_attrs_schema,
    is_dataclass,
    is_msgspec_struct,
    is_pydantic_model,
    is_typed_dict,
)

__all__ = ("detect_schema_type", "to_schema")

logger = get_logger("utils.schema")


@lru_cache(maxsize=128)
def detect_schema_type(schema_type: type) -> "str | None":
    """Name the schema library ``schema_type`` belongs to.

    Returns:
        ``"typed_dict"``, ``"dataclass"``, ``"msgspec"``, ``"pydantic"``,
        ``"attrs"``, or None when the type is none of them.
    """
    return (
        "typed_dict"
        if is_typed_dict(schema_type)
        else "dataclass"
        if is_dataclass(schema_type)
        else "msgspec"
        if is_msgspec_struct(schema_type)
        else "pydantic"
        if is_pydantic_model(schema_type)
        else "attrs"
        if is_attrs_schema(schema_type)
        else None
    )


def _msgspec_dec_hook(target_type: Any, value: Any) -> Any:
    """Accept driver values for types msgspec does not decode natively."""
    if isinstance(target_type, type):
        if isinstance(value, target_type):
            return value
        if issubclass(target_type, PurePath):
            return target_type(str(value))
    msg = f"Cannot convert {type(value).__name__} to {target_type!r}"
    raise TypeError(msg)


def _convert_typed_dict(row: "dict[str, Any]", schema_type: Any) -> Any:
    return row


def _convert_keywords(row: "dict[str, Any]", schema_type: Any) -> Any:
    return schema_type(**row)


def _convert_msgspec(row: "dict[str, Any]", schema_type: Any) -> Any:
    return convert(row, type=schema_type, from_attributes=True, dec_hook=_msgspec_dec_hook)


def _convert_pydantic(row: "dict[str, Any]", schema_type: Any) -> Any:
    return get_type_adapter(schema_type).validate_python(row, from_attributes=True)


_SCHEMA_CONVERTERS: "dict[str, Callable[[dict[str, Any], Any], Any]]" = {
    "typed_dict": _convert_typed_dict,
    "dataclass": _convert_keywords,
    "msgspec": _convert_msgspec,
    "pydantic": _convert_pydantic,
    "attrs": _convert_keywords,
}


@overload
def to_schema(row: "Mapping[str, Any]", *, schema_type: "type[SchemaT]") -> "SchemaT": ...
@overload
def to_schema(row: "Mapping[str, Any]", *, schema_type: None = None) -> "Mapping[str, Any]": ...


def to_schema(row: "Mapping[str, Any]", *, schema_type: Any = None) -> Any:
    """Build an instance of ``schema_type`` from one row.

    Dataclasses and attrs classes receive the columns as keyword arguments.
    msgspec and pydantic validate the row. A TypedDict yields a plain dict.

    Args:
        row: Column values keyed by column name.
        schema_type: Target class. With None the row is returned unchanged.

    Raises:
        SchemaConversionError: If ``schema_type`` is not a supported schema class.
    """
    if schema_type is None:
        return row

    schema_type_key = detect_schema_type(schema_type)
    if schema_type_key is None:
        msg = "`schema_type` should be a valid Dataclass, Pydantic model, Msgspec struct, Attrs class, or TypedDict"
        raise SchemaConversionError(msg)

    logger.debug("Converting row to %s schema %s", schema_type_key, schema_type.__name__)
    return _SCHEMA_CONVERTERS[schema_type_key](dict(row), schema_type)
