"""
Unit tests for plain_to_dto / dto_to_plain.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List

import pytest
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from http_service.utils.dto import dto_to_plain, plain_to_dto


class Hit(BaseModel):
    id: int
    timestamp: datetime


class Dto(BaseModel):
    id: int
    name: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    hits: List[Hit]

    model_config = ConfigDict(populate_by_name=True)


@dataclass
class Point:
    x: int
    y: int


def build_plain():
    return {
        "id": 1,
        "name": "test",
        "createdAt": "2022-12-12T12:12:12.000Z",
        "updatedAt": "2022-12-12T12:12:12.000Z",
        "hits": [
            {"id": 1, "timestamp": "2022-12-12T12:12:15.000Z"},
            {"id": 2, "timestamp": "2022-12-12T12:12:16.000Z"},
        ],
    }


class TestPlainToDto:
    """Test cases for plain_to_dto."""

    def test_converts_to_dto(self):
        """Test nested values, including dates, are converted."""
        dto = plain_to_dto(build_plain(), Dto)

        assert isinstance(dto, Dto)
        assert dto.created_at == datetime(2022, 12, 12, 12, 12, 12, tzinfo=timezone.utc)
        assert isinstance(dto.hits[0], Hit)
        assert dto.hits[1].timestamp == datetime(2022, 12, 12, 12, 12, 16, tzinfo=timezone.utc)

    def test_works_with_lists(self):
        """Test lists are converted element-wise."""
        plain = [build_plain() for _ in range(5)]

        dtos = plain_to_dto(plain, Dto)

        assert len(dtos) == 5
        assert all(isinstance(dto, Dto) for dto in dtos)

    def test_returns_plain_without_dto(self):
        """Test the value is untouched when no DTO is given."""
        plain = build_plain()

        assert plain_to_dto(plain) is plain

    def test_none_passes_through(self):
        """Test None is never validated."""
        assert plain_to_dto(None, Dto) is None

    def test_dataclass_target(self):
        """Test any pydantic-validatable type works as a target."""
        assert plain_to_dto({"x": 1, "y": "2"}, Point) == Point(1, 2)

    def test_invalid_value_raises(self):
        """Test validation errors propagate."""
        with pytest.raises(ValidationError):
            plain_to_dto({"id": "abc"}, Dto)


class TestDtoToPlain:
    """Test cases for dto_to_plain."""

    def test_model_dumped_by_alias(self):
        """Test models are dumped to JSON-able data using aliases."""
        dto = plain_to_dto(build_plain(), Dto)

        plain = dto_to_plain(dto)

        assert plain["createdAt"] == "2022-12-12T12:12:12Z"
        assert plain["hits"][0] == {"id": 1, "timestamp": "2022-12-12T12:12:15Z"}

    def test_nested_in_containers(self):
        """Test models nested in dicts and lists are dumped."""
        hit = Hit(id=1, timestamp=datetime(2022, 1, 1, tzinfo=timezone.utc))

        assert dto_to_plain({"hits": [hit], "n": 1}) == {
            "hits": [{"id": 1, "timestamp": "2022-01-01T00:00:00Z"}],
            "n": 1,
        }

    def test_plain_values_unchanged(self):
        """Test plain data passes through."""
        assert dto_to_plain({"a": [1, "b", None]}) == {"a": [1, "b", None]}
        assert dto_to_plain(None) is None
