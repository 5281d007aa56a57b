"""
Example 02: Value Transformers

This example stores list and dict properties as JSON text and maps the
rows back, using an explicit MetadataRegistry instead of the default one.
"""

from entity_sql import (
    BaseEntity,
    CommonTransformers,
    MetadataRegistry,
    QueryBuilderFactory,
    column,
    map_row,
    table,
    transformer,
)

registry = MetadataRegistry()


@table("profiles", registry=registry)
class Profile(BaseEntity):
    id = column("id", exclude_from_insert=True, exclude_from_update=True)
    tags = column("tags", transformer=CommonTransformers.STRING_ARRAY)
    scores = column("scores", transformer=CommonTransformers.NUMBER_ARRAY)
    settings = column("settings", transformer=CommonTransformers.JSON)
    handle = column("handle", transformer=transformer(to=str.lower, from_=str.lower))


def main():
    factory = QueryBuilderFactory(registry=registry)

    profile = Profile()
    profile.tags = ["admin", "beta"]
    profile.scores = []
    profile.settings = {"theme": "dark"}
    profile.handle = "Alice"

    sql, params = factory.create_insert(Profile).values(profile).build()
    print("=== INSERT ===")
    print(f"{sql}\n  params={params}\n")

    row = {
        "profiles_id": 1,
        "profiles_tags": '["admin", "beta"]',
        "profiles_scores": None,
        "profiles_settings": '{"theme": "dark"}',
        "profiles_handle": "alice",
    }
    loaded = map_row(Profile, row, registry=registry)
    print("=== Mapped row ===")
    print(f"  tags={loaded.tags} scores={loaded.scores} settings={loaded.settings}")


if __name__ == "__main__":
    main()
