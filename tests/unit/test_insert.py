"""Unit tests for InsertQueryBuilder."""

from __future__ import annotations

import pytest

from entity_sql import (
    InsertQueryBuilder,
    QueryBuildError,
    TransformationError,
    column,
    table,
    transformer,
)


class TestSingleInsert:
    def test_insert_entity(self, factory, entities) -> None:
        pet = entities.Pet()
        pet.id = 1
        pet.name = "Miyav"
        pet.birth_date = "2020-01-01"

        sql, params = factory.create_insert(entities.Pet).values(pet).build()
        assert sql == "INSERT INTO pets(id, name, birth_date) VALUES (?, ?, ?)"
        assert params == (1, "Miyav", "2020-01-01")

    def test_missing_properties_bind_null(self, factory, entities) -> None:
        pet = entities.Pet()
        pet.id = 2
        sql, params = factory.create_insert(entities.Pet).values(pet).build()
        assert sql.count("?") == 3
        assert params == (2, None, None)

    def test_mapping_as_entity(self, factory, entities) -> None:
        _, params = factory.create_insert(entities.Pet).values({"name": "Rex", "id": 7}).build()
        assert params == (7, "Rex", None)

    def test_excluded_columns_never_appear(self, factory, entities) -> None:
        account = entities.Account()
        account.id = 99
        account.email = "a@example.com"
        account.created_at = "2024-01-01"

        sql, params = factory.create_insert(entities.Account).values(account).build()
        assert sql == "INSERT INTO accounts(email, created_at) VALUES (?, ?)"
        assert params == ("a@example.com", "2024-01-01")

    def test_transformers_applied(self, factory, entities) -> None:
        row = entities.CommonTypes()
        row.number_arr = [1, 2]
        row.string_arr = []
        row.obj_col = {"k": "v"}

        _, params = factory.create_insert(entities.CommonTypes).values(row).build()
        assert params == ("[1, 2]", None, '{"k": "v"}')

    def test_failing_transformer_is_wrapped(self, registry) -> None:
        def explode(value):
            raise ValueError("boom")

        @table("boxes", registry=registry)
        class Box:
            payload = column("payload", transformer=transformer(to=explode, from_=explode))

        box = Box()
        box.payload = 1
        with pytest.raises(TransformationError, match="payload") as exc_info:
            InsertQueryBuilder(Box, registry).values(box).build()
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestBatchInsert:
    def test_batch_insert(self, factory, entities) -> None:
        pets = []
        for i in (1, 2, 3):
            pet = entities.Pet()
            pet.id = i
            pet.name = f"Pet{i}"
            pets.append(pet)

        sql, params = factory.create_insert(entities.Pet).values_many(pets).build()
        assert sql == (
            "INSERT INTO pets(id, name, birth_date) VALUES (?, ?, ?), (?, ?, ?), (?, ?, ?)"
        )
        assert params == (1, "Pet1", None, 2, "Pet2", None, 3, "Pet3", None)

    def test_batch_accepts_generator(self, factory, entities) -> None:
        rows = ({"id": i} for i in range(2))
        sql, params = factory.create_insert(entities.Pet).values_many(rows).build()
        assert sql.count("(?, ?, ?)") == 2
        assert len(params) == 6

    def test_empty_batch(self, factory, entities) -> None:
        builder = factory.create_insert(entities.Pet).values_many([])
        with pytest.raises(QueryBuildError, match="empty"):
            builder.build()


class TestInsertErrors:
    def test_no_values(self, factory, entities) -> None:
        with pytest.raises(QueryBuildError, match="No values"):
            factory.create_insert(entities.Pet).build()

    def test_all_columns_excluded(self, registry) -> None:
        @table("audit", registry=registry)
        class Audit:
            id = column("id", exclude_from_insert=True)

        with pytest.raises(QueryBuildError, match="excluded"):
            InsertQueryBuilder(Audit, registry).values({"id": 1}).build()
