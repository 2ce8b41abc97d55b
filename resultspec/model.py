"""Domain model base class.

A :class:`Model` subclass marks a class as a domain entity: results seed it
from a row in one step and fire :attr:`~resultspec.events.ModelEvents.AFTER_QUERY`
on every instance they build.
"""

import inspect
from collections.abc import Mapping
from typing import Any, ClassVar, Optional, get_origin

from resultspec.events import EventMixin
from resultspec.utils.serializers import to_json

__all__ = ("Model",)


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


class Model(EventMixin):
    """Base class for row-backed domain entities.

    Fields are the annotated class attributes, collected along the MRO. A class
    attribute value acts as the field default.

    Columns become instance attributes, so a column may share its name with a
    method. Internally, methods are looked up on the class.

    Example::

        class User(Model):
            id: int
            name: str
            active: bool = True

        user = User({"id": 1, "name": "a"})
    """

    __model_fields__: ClassVar[tuple[str, ...]] = ()
    __model_defaults__: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        fields: dict[str, None] = {}
        for base in reversed(cls.__mro__):
            for name, annotation in inspect.get_annotations(base).items():
                if name.startswith("__") or _is_class_var(annotation):
                    continue
                fields[name] = None
        cls.__model_fields__ = tuple(fields)
        # defaults come from model subclasses only, never from inherited methods
        owners = [base for base in cls.__mro__ if base is not Model and issubclass(base, Model)]
        cls.__model_defaults__ = {
            name: next((vars(base)[name] for base in owners if name in vars(base)), None) for name in fields
        }

    def __init__(self, data: "Optional[Mapping[str, Any]]" = None, **kwargs: Any) -> None:
        for name, default in type(self).__model_defaults__.items():
            setattr(self, name, default)
        if data:
            for key, value in data.items():
                setattr(self, key, value)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def to_dict(self) -> "dict[str, Any]":
        """Return declared fields first, then any extra attributes set on the instance."""
        result = {name: getattr(self, name) for name in type(self).__model_fields__}
        for key, value in vars(self).items():
            if key.startswith("__") or key in result:
                continue
            result[key] = value
        return result

    def to_json(self) -> str:
        return to_json(type(self).to_dict(self))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        to_dict = type(self).to_dict
        return to_dict(self) == to_dict(other)  # type: ignore[arg-type]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in type(self).to_dict(self).items())
        return f"{type(self).__name__}({fields})"
