"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from entity_sql import (
    BaseEntity,
    CommonTransformers,
    MetadataRegistry,
    QueryBuilderFactory,
    column,
    many_to_one,
    one_to_many,
    table,
)


@dataclass
class Entities:
    """Entity classes registered into one fresh registry."""

    Pet: type
    Reminder: type
    CommonTypes: type
    Account: type


@pytest.fixture
def registry() -> MetadataRegistry:
    """Empty registry isolated from the process-wide default."""
    return MetadataRegistry()


@pytest.fixture
def entities(registry: MetadataRegistry) -> Entities:
    """Pet / Reminder (mutually related), CommonTypes and Account.

    Pet -> Reminder uses a deferred target because Reminder is defined later.
    """

    @table("pets", registry=registry)
    class Pet(BaseEntity):
        id = column("id")
        name = column("name")
        birth_date = column("birth_date")
        reminders = one_to_many(
            self_reference="id",
            target_table="reminders",
            target_column="pet_id",
            target=lambda: Reminder,
        )

    @table("reminders", registry=registry)
    class Reminder(BaseEntity):
        id = column("id")
        pet_id = column("pet_id")
        reminder_date = column("reminder_date")
        pet = many_to_one(
            self_reference="pet_id",
            target_table="pets",
            target_column="id",
            target=Pet,
        )

    @table("commo_types", registry=registry)
    class CommonTypes(BaseEntity):
        number_arr = column("number_arr", transformer=CommonTransformers.NUMBER_ARRAY)
        string_arr = column("string_arr", transformer=CommonTransformers.STRING_ARRAY)
        obj_col = column("obj_col", transformer=CommonTransformers.JSON)

    @table("accounts", registry=registry)
    class Account(BaseEntity):
        id = column("id", exclude_from_insert=True, exclude_from_update=True)
        email = column("email")
        created_at = column("created_at", exclude_from_update=True)

    return Entities(Pet=Pet, Reminder=Reminder, CommonTypes=CommonTypes, Account=Account)


@pytest.fixture
def factory(registry: MetadataRegistry, entities: Entities) -> QueryBuilderFactory:
    """Factory bound to the fixture registry."""
    return QueryBuilderFactory(registry=registry)
