"""Tests for resultspec.utils.schema."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Any, TypedDict
from uuid import UUID

import msgspec
import pytest
from msgspec import Struct
from pydantic import BaseModel

from resultspec.exceptions import SchemaConversionError
from resultspec.typing import attrs_define, attrs_field
from resultspec.utils.schema import detect_schema_type, to_schema


@dataclass
class UserDataclass:
    name: str
    email: str
    age: int = 18


class UserPydantic(BaseModel):
    name: str
    email: str
    age: int = 18


class UserMsgspec(Struct):
    name: str
    email: str
    age: int = 18


@attrs_define
class UserAttrs:
    name: str = attrs_field()
    email: str = attrs_field()
    age: int = attrs_field(default=18)


class UserTypedDict(TypedDict):
    name: str
    email: str
    age: int


class Event(Struct):
    id: UUID
    happened_at: datetime.datetime


class Upload(Struct):
    path: PurePosixPath


class Owner:
    pass


class Owned(Struct):
    owner: Owner


@pytest.fixture
def sample_dict() -> dict[str, Any]:
    return {"name": "John", "email": "john@example.com", "age": 30}


class TestToSchema:
    def test_no_schema_type_returns_data(self, sample_dict: dict[str, Any]) -> None:
        assert to_schema(sample_dict) is sample_dict

    @pytest.mark.parametrize("schema_type", [UserDataclass, UserPydantic, UserMsgspec, UserAttrs])
    def test_single(self, sample_dict: dict[str, Any], schema_type: type[Any]) -> None:
        result = to_schema(sample_dict, schema_type=schema_type)

        assert isinstance(result, schema_type)
        assert (result.name, result.email, result.age) == ("John", "john@example.com", 30)

    def test_typed_dict_returns_a_copy(self, sample_dict: dict[str, Any]) -> None:
        result = to_schema(sample_dict, schema_type=UserTypedDict)

        assert result == sample_dict
        assert result is not sample_dict

    def test_mapping_rows_are_accepted(self) -> None:
        row = MappingProxyType({"name": "John", "email": "john@example.com"})

        assert to_schema(row, schema_type=UserDataclass) == UserDataclass("John", "john@example.com")

    def test_msgspec_builds_paths_from_strings(self) -> None:
        assert to_schema({"path": "/tmp/report.csv"}, schema_type=Upload).path == PurePosixPath("/tmp/report.csv")

    def test_msgspec_rejects_unconvertible_values(self) -> None:
        with pytest.raises(msgspec.ValidationError):
            to_schema({"owner": 1}, schema_type=Owned)

    def test_msgspec_accepts_native_values(self) -> None:
        event_id = UUID("12345678-1234-5678-1234-567812345678")
        happened_at = datetime.datetime(2024, 1, 1, 12, 0, 0)

        event = to_schema({"id": event_id, "happened_at": happened_at}, schema_type=Event)

        assert event.id == event_id
        assert event.happened_at == happened_at

    def test_unsupported_schema_type(self, sample_dict: dict[str, Any]) -> None:
        class NotASchema:
            pass

        with pytest.raises(SchemaConversionError, match="schema_type"):
            to_schema(sample_dict, schema_type=NotASchema)


@pytest.mark.parametrize(
    ("schema_type", "expected"),
    [
        (UserTypedDict, "typed_dict"),
        (UserDataclass, "dataclass"),
        (UserMsgspec, "msgspec"),
        (UserPydantic, "pydantic"),
        (UserAttrs, "attrs"),
        (dict, None),
    ],
)
def test_detect_schema_type(schema_type: type[Any], expected: str | None) -> None:
    assert detect_schema_type(schema_type) == expected
