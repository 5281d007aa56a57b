"""Builder factory and functional shortcuts.

The factory binds a registry, a config and an operator registry once and
hands them to every builder it creates. The module-level functions are
one-call shortcuts over the process-wide factory.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from entity_sql.core.config import CompilerConfig
from entity_sql.core.enums import SortDirection
from entity_sql.core.exceptions import QueryBuildError
from entity_sql.core.registry import MetadataRegistry, get_default_registry
from entity_sql.query.base import QueryResult
from entity_sql.query.delete import DeleteQueryBuilder
from entity_sql.query.insert import InsertQueryBuilder
from entity_sql.query.select import SelectQueryBuilder
from entity_sql.query.update import UpdateQueryBuilder
from entity_sql.query.where import OperatorRegistry, WhereClause

T = TypeVar("T")


class QueryBuilderFactory:
    """Creates statement builders sharing one registry and config."""

    def __init__(
        self,
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
        operators: OperatorRegistry | None = None,
    ) -> None:
        self._registry = registry
        self._config = config
        self._operators = operators

    @property
    def registry(self) -> MetadataRegistry:
        return self._registry if self._registry is not None else get_default_registry()

    def create_select(self, entity: type[T]) -> SelectQueryBuilder[T]:
        return SelectQueryBuilder(entity, self._registry, self._config, self._operators)

    def create_insert(self, entity: type[T]) -> InsertQueryBuilder[T]:
        return InsertQueryBuilder(entity, self._registry, self._config)

    def create_update(self, entity: type[T]) -> UpdateQueryBuilder[T]:
        return UpdateQueryBuilder(entity, self._registry, self._config, self._operators)

    def create_delete(self, entity: type[T]) -> DeleteQueryBuilder[T]:
        return DeleteQueryBuilder(entity, self._registry, self._config, self._operators)


query_builder_factory = QueryBuilderFactory()


def select_query(
    entity: type,
    where: WhereClause | None = None,
    relations: Iterable[str] | None = None,
    order_by: Mapping[str, SortDirection | str] | None = None,
    limit: int | None = None,
    offset: int | None = None,
    factory: QueryBuilderFactory | None = None,
) -> QueryResult:
    """Build a SELECT in one call."""
    builder = (factory or query_builder_factory).create_select(entity)
    if where:
        builder.where(where)
    if relations:
        builder.relations(relations)
    for property_key, direction in (order_by or {}).items():
        builder.order_by(property_key, direction)
    if limit is not None:
        builder.limit(limit)
    if offset is not None:
        builder.offset(offset)
    return builder.build()


def insert_query(
    entities: Any,
    entity_type: type | None = None,
    factory: QueryBuilderFactory | None = None,
) -> QueryResult:
    """Build an INSERT for one entity or a list/tuple of entities.

    The entity type is taken from the (first) entity unless given.
    """
    batch = isinstance(entities, (list, tuple))
    if batch and not entities:
        raise QueryBuildError("Cannot build a batch INSERT from an empty sequence")
    sample = entities[0] if batch else entities
    builder = (factory or query_builder_factory).create_insert(entity_type or type(sample))
    if batch:
        builder.values_many(entities)
    else:
        builder.values(entities)
    return builder.build()


def update_query(
    entity: type,
    values: Any,
    where: WhereClause | None = None,
    factory: QueryBuilderFactory | None = None,
) -> QueryResult:
    """Build an UPDATE in one call."""
    builder = (factory or query_builder_factory).create_update(entity).set(values)
    if where:
        builder.where(where)
    return builder.build()


def delete_query(
    entity: type,
    where: WhereClause | None = None,
    factory: QueryBuilderFactory | None = None,
) -> QueryResult:
    """Build a DELETE in one call."""
    builder = (factory or query_builder_factory).create_delete(entity)
    if where:
        builder.where(where)
    return builder.build()
