"""Unit tests for the declarative registration surface and BaseEntity."""

from __future__ import annotations

import pytest

from entity_sql import (
    BaseEntity,
    DeferredTarget,
    DirectTarget,
    MetadataRegistry,
    RelationKind,
    ValidationError,
    column,
    get_default_registry,
    table,
)
from entity_sql.declarative import Column, Relation


class TestTableDecorator:
    def test_markers_registered_in_definition_order(self, registry, entities) -> None:
        table_meta = registry.get_table(entities.Pet)
        assert table_meta.name == "pets"
        assert table_meta.property_keys == ["id", "name", "birth_date"]
        assert [c.name for c in table_meta.columns] == ["id", "name", "birth_date"]

    def test_relations_registered(self, registry, entities) -> None:
        relation = registry.get_table(entities.Pet).relation_for("reminders")
        assert relation.kind is RelationKind.ONE_TO_MANY
        assert relation.self_reference == "id"
        assert relation.target_table == "reminders"
        assert relation.target_column == "pet_id"
        assert isinstance(relation.target, DeferredTarget)
        assert relation.resolve_target() is entities.Reminder

        back = registry.get_table(entities.Reminder).relation_for("pet")
        assert back.kind is RelationKind.MANY_TO_ONE
        assert back.target == DirectTarget(entities.Pet)

    def test_uses_default_registry_when_none_given(self) -> None:
        default = get_default_registry()

        @table("default_things")
        class Thing:
            id = column("id")

        try:
            assert default.get_table(Thing).name == "default_things"
        finally:
            default.clear()

    def test_reapplying_decorator_is_noop(self, registry, entities) -> None:
        before = registry.get_table(entities.Pet)
        for _ in range(3):
            assert table("pets", registry=registry)(entities.Pet) is entities.Pet
        assert registry.get_table(entities.Pet) is before
        assert entities.Pet not in registry._pending_columns
        assert entities.Pet not in registry._pending_relations

    def test_class_without_columns(self, registry: MetadataRegistry) -> None:
        with pytest.raises(ValidationError):

            @table("empty", registry=registry)
            class Empty:
                pass

    def test_inherited_markers(self, registry: MetadataRegistry) -> None:
        class Timestamped:
            created_at = column("created_at", exclude_from_update=True)

        @table("notes", registry=registry)
        class Note(Timestamped):
            id = column("id")

        assert registry.get_table(Note).property_keys == ["created_at", "id"]

    def test_class_attribute_is_marker(self, entities) -> None:
        assert isinstance(entities.Pet.name, Column)
        assert isinstance(entities.Pet.reminders, Relation)

    def test_unassigned_attribute_reads_none(self, entities) -> None:
        pet = entities.Pet()
        assert pet.name is None
        assert pet.reminders is None
        pet.name = "Rex"
        assert pet.name == "Rex"


class TestBaseEntity:
    def test_to_model(self, entities) -> None:
        pet = entities.Pet.to_model({"pets_id": 1, "pets_name": "Pet1"})
        assert isinstance(pet, entities.Pet)
        assert pet.id == 1
        assert pet.name == "Pet1"
        assert pet.birth_date is None

    def test_to_models(self, entities) -> None:
        rows = [
            {"pets_id": 1, "pets_name": "Pet1", "pets_birth_date": "2020-01-01"},
            {"pets_id": 2, "pets_name": "Pet2", "pets_birth_date": "2020-02-01"},
        ]
        pets = entities.Pet.to_models(rows)
        assert len(pets) == 2
        assert [p.name for p in pets] == ["Pet1", "Pet2"]

    def test_to_model_with_prefix(self, entities) -> None:
        reminder = entities.Reminder.to_model({"r_id": 3}, column_prefix="r_")
        assert reminder.id == 3

    def test_to_plain(self, entities) -> None:
        pet = entities.Pet()
        pet.id = 1
        pet.name = "Fluffy"
        pet.birth_date = "2020-01-01"
        pet.reminders = []
        assert pet.to_plain() == {"id": 1, "name": "Fluffy", "birth_date": "2020-01-01"}

    def test_to_plain_skips_unassigned(self, entities) -> None:
        pet = entities.Pet()
        pet.id = 1
        assert pet.to_plain() == {"id": 1}

    def test_clone(self, entities) -> None:
        original = entities.Pet()
        original.id = 1
        original.name = "Original"
        cloned = original.clone()
        assert isinstance(cloned, entities.Pet)
        assert cloned is not original
        assert cloned.to_plain() == original.to_plain()

    def test_repr(self, entities) -> None:
        pet = entities.Pet()
        pet.id = 1
        assert repr(pet) == "Pet(id=1)"

    def test_repr_unregistered(self) -> None:
        class Loose(BaseEntity):
            pass

        assert "Loose object" in repr(Loose())
