"""
Example 01: Basic Statement Building

This example declares two related entities and prints the parameterized
statements entity_sql compiles for them, then runs them against SQLite.
"""

import sqlite3

from entity_sql import (
    BaseEntity,
    column,
    many_to_one,
    one_to_many,
    query_builder_factory,
    table,
)


@table("pets")
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


@table("reminders")
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


def main():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript("""
        CREATE TABLE pets (id INTEGER PRIMARY KEY, name TEXT, birth_date TEXT);
        CREATE TABLE reminders (id INTEGER PRIMARY KEY, pet_id INTEGER, reminder_date TEXT);
    """)

    print("=== INSERT ===\n")
    pets = []
    for i, name in enumerate(["Rex", "Boncuk", "Tekir"], start=1):
        pet = Pet()
        pet.id = i
        pet.name = name
        pets.append(pet)
    sql, params = query_builder_factory.create_insert(Pet).values_many(pets).build()
    print(f"{sql}\n  params={params}\n")
    conn.execute(sql, params)

    sql, params = (
        query_builder_factory.create_insert(Reminder)
        .values({"id": 10, "pet_id": 1, "reminder_date": "2024-01-01"})
        .build()
    )
    conn.execute(sql, params)

    print("=== SELECT with join ===\n")
    sql, params = (
        query_builder_factory.create_select(Pet)
        .relation("reminders")
        .where({"id": {"$in": [1, 2]}})
        .order_by("name", "ASC")
        .build()
    )
    print(f"{sql}\n  params={params}\n")
    rows = [dict(row) for row in conn.execute(sql, params)]
    for pet in Pet.to_models(rows):
        print(f"  - {pet!r}")
    print()

    print("=== UPDATE / DELETE ===\n")
    sql, params = query_builder_factory.create_update(Pet).set({"name": "Karabas"}).where({"id": 2}).build()
    print(f"{sql}\n  params={params}")
    conn.execute(sql, params)

    sql, params = query_builder_factory.create_delete(Reminder).where({"pet_id": {"$not": 1}}).build()
    print(f"{sql}\n  params={params}")
    conn.execute(sql, params)

    conn.close()


if __name__ == "__main__":
    main()
