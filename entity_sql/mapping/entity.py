"""Row-to-entity mapper driven by registered table metadata.

Row keys are ``<prefix><column name>``; the default prefix is the table
name followed by the configured separator (``pets_``), matching the
projection aliases of SelectQueryBuilder. Supports plain classes,
dataclasses with defaults, and Pydantic models.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from entity_sql.core.config import DEFAULT_CONFIG, CompilerConfig
from entity_sql.core.exceptions import EntityConstructionError, TransformationError
from entity_sql.core.metadata import TableMetadata
from entity_sql.core.registry import MetadataRegistry, get_default_registry
from entity_sql.mapping.protocol import Mapper

T = TypeVar("T")


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


class EntityMapper(Mapper[T]):
    """Maps flat rows onto instances of a registered entity type.

    Columns whose key is missing from the row are left untouched on the
    new instance. Relation properties are never populated.

    Args:
        entity: Registered entity type.
        registry: Registry holding the entity's metadata.
        prefix: Row key prefix; defaults to ``<table name><separator>``.
        config: Compiler configuration.
    """

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        prefix: str | None = None,
        config: CompilerConfig | None = None,
    ) -> None:
        self._entity = entity
        self._registry = registry if registry is not None else get_default_registry()
        self._prefix = prefix
        self._config = config if config is not None else DEFAULT_CONFIG
        self._is_pydantic = _is_pydantic_model(entity)

    def _table(self) -> TableMetadata:
        return self._registry.get_table(self._entity)

    def prefix_for(self, table: TableMetadata) -> str:
        if self._prefix is not None:
            return self._prefix
        return f"{table.name}{self._config.column_alias_separator}"

    def extract(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """Property key -> domain value for every column present in *row*."""
        table = self._table()
        prefix = self.prefix_for(table)
        values: dict[str, Any] = {}
        for column in table.columns:
            key = f"{prefix}{column.name}"
            if key not in row:
                continue
            raw = row[key]
            if column.transformer is None:
                values[column.property_key] = raw
                continue
            try:
                values[column.property_key] = column.transformer.from_(raw)
            except Exception as e:
                raise TransformationError(column.name, "from", str(e)) from e
        return values

    def _construct(self, values: dict[str, Any]) -> T:
        if self._is_pydantic:
            return self._entity.model_construct(**values)  # type: ignore[attr-defined, no-any-return]

        try:
            instance = self._entity()
        except TypeError as e:
            raise EntityConstructionError(self._entity.__name__, str(e)) from e

        for property_key, value in values.items():
            try:
                setattr(instance, property_key, value)
            except AttributeError as e:
                raise EntityConstructionError(self._entity.__name__, str(e)) from e
        return instance

    def map_one(self, row: Mapping[str, Any]) -> T:
        """Map a single row to an entity instance."""
        return self._construct(self.extract(row))

    def map_many(self, rows: Iterable[Mapping[str, Any]]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]


def map_row(
    entity: type[T],
    row: Mapping[str, Any],
    column_prefix: str | None = None,
    registry: MetadataRegistry | None = None,
) -> T:
    """Map one row onto a new *entity* instance."""
    return EntityMapper(entity, registry, column_prefix).map_one(row)
