"""Unit tests for EntityMapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from pydantic import BaseModel

from entity_sql import (
    EntityConstructionError,
    EntityMapper,
    Mapper,
    MetadataNotFoundError,
    TransformationError,
    map_row,
    transformer,
)
from entity_sql.core.registry import MetadataRegistry


@dataclass
class TagDC:
    id: int = 0
    labels: list[str] = field(default_factory=list)


class TagPydantic(BaseModel):
    id: int = 0
    title: str = "untitled"


class NeedsArgs:
    def __init__(self, id: int) -> None:
        self.id = id


class UpperNameMapper:
    def map_one(self, row):
        return row["name"].upper()

    def map_many(self, rows):
        return [self.map_one(row) for row in rows]


def _map_all(mapper: Mapper[Any], rows) -> list[Any]:
    return mapper.map_many(rows)


class TestEntityMapper:
    def test_map_with_default_prefix(self, registry, entities) -> None:
        pet = map_row(entities.Pet, {"pets_id": 1, "pets_name": "Pet1"}, registry=registry)
        assert isinstance(pet, entities.Pet)
        assert pet.id == 1
        assert pet.name == "Pet1"
        assert pet.birth_date is None
        assert "birth_date" not in vars(pet)

    def test_custom_prefix(self, registry, entities) -> None:
        row = {"reminders_id": 4, "reminders_pet_id": 1, "reminders_reminder_date": "2024-01-01"}
        reminder = map_row(entities.Reminder, row, "reminders_", registry)
        assert reminder.pet_id == 1

    def test_joined_row_with_relation_prefix(self, registry, entities) -> None:
        row = {
            "pets_id": 1,
            "pets_name": "Rex",
            "reminders_id": 9,
            "reminders_pet_id": 1,
            "reminders_reminder_date": "2024-02-02",
        }
        pet = EntityMapper(entities.Pet, registry).map_one(row)
        reminder = EntityMapper(entities.Reminder, registry, prefix="reminders_").map_one(row)
        assert pet.id == 1
        assert reminder.id == 9
        assert pet.reminders is None

    def test_transformers_revive_values(self, registry, entities) -> None:
        row = {
            "commo_types_number_arr": "[1, 2, 3]",
            "commo_types_string_arr": None,
            "commo_types_obj_col": '{"a": 1}',
        }
        result = map_row(entities.CommonTypes, row, registry=registry)
        assert result.number_arr == [1, 2, 3]
        assert result.string_arr == []
        assert result.obj_col == {"a": 1}

    def test_raw_value_without_transformer_is_verbatim(self, registry, entities) -> None:
        marker = object()
        pet = map_row(entities.Pet, {"pets_name": marker}, registry=registry)
        assert pet.name is marker

    def test_map_many(self, registry, entities) -> None:
        rows = [{"pets_id": 1}, {"pets_id": 2}]
        pets = EntityMapper(entities.Pet, registry).map_many(rows)
        assert [p.id for p in pets] == [1, 2]
        assert EntityMapper(entities.Pet, registry).map_many([]) == []

    def test_satisfies_mapper_protocol(self, registry, entities) -> None:
        mapper = EntityMapper(entities.Pet, registry)
        assert isinstance(mapper, Mapper)
        pets = _map_all(mapper, [{"pets_id": 1}, {"pets_id": 2}])
        assert [p.id for p in pets] == [1, 2]

    def test_custom_mapper_is_interchangeable(self) -> None:
        mapper = UpperNameMapper()
        assert isinstance(mapper, Mapper)
        assert _map_all(mapper, [{"name": "rex"}, {"name": "tom"}]) == ["REX", "TOM"]

    def test_dataclass_entity(self, registry: MetadataRegistry) -> None:
        registry.register_column(TagDC, "id", "id")
        registry.register_column(TagDC, "labels", "labels", transformer=None)
        registry.register_table(TagDC, "tags")

        tag = map_row(TagDC, {"tags_id": 3}, registry=registry)
        assert tag == TagDC(id=3, labels=[])

    def test_pydantic_entity_keeps_defaults(self, registry: MetadataRegistry) -> None:
        registry.register_column(TagPydantic, "id", "id")
        registry.register_column(TagPydantic, "title", "title")
        registry.register_table(TagPydantic, "tags")

        tag = map_row(TagPydantic, {"tags_id": 5}, registry=registry)
        assert isinstance(tag, TagPydantic)
        assert tag.id == 5
        assert tag.title == "untitled"

    def test_entity_requiring_arguments(self, registry: MetadataRegistry) -> None:
        registry.register_column(NeedsArgs, "id", "id")
        registry.register_table(NeedsArgs, "needs")
        with pytest.raises(EntityConstructionError, match="NeedsArgs"):
            map_row(NeedsArgs, {"needs_id": 1}, registry=registry)

    def test_failing_from_transformer(self, registry: MetadataRegistry) -> None:
        class Blob:
            pass

        registry.register_column(
            Blob, "data", "data", transformer=transformer(to=str, from_=int)
        )
        registry.register_table(Blob, "blobs")
        with pytest.raises(TransformationError, match="from"):
            map_row(Blob, {"blobs_data": "not-a-number"}, registry=registry)

    def test_unregistered_entity(self, registry: MetadataRegistry) -> None:
        with pytest.raises(MetadataNotFoundError):
            map_row(NeedsArgs, {}, registry=registry)
