"""Object construction for materialized rows."""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Optional

from resultspec.model import Model
from resultspec.utils.schema import to_schema
from resultspec.utils.type_guards import is_schema_type

__all__ = ("get_object_class", "is_model_type", "new_instance")


@lru_cache(maxsize=256)
def is_model_type(cls: type) -> bool:
    """Check whether ``cls`` is a domain entity that accepts seed data at construction.

    :class:`~resultspec.model.Model` subclasses and classes from the supported
    schema libraries qualify. Anything else is a plain type.
    """
    if not isinstance(cls, type):
        return False
    return issubclass(cls, Model) or is_schema_type(cls)


def new_instance(cls: "type[Any]", data: "Optional[Mapping[str, Any]]" = None) -> Any:
    """Build an instance of ``cls``.

    Args:
        cls: Class to instantiate.
        data: Seed data. Model types populate their fields from it during
            construction. Without it an empty instance is returned for the
            caller to populate.

    Returns:
        The new instance.
    """
    if data is None:
        return cls()
    if isinstance(cls, type) and issubclass(cls, Model):
        return cls(data)
    return to_schema(dict(data), schema_type=cls)


def get_object_class(obj: Any) -> type:
    """Return the real runtime class of ``obj``."""
    return type(obj)
