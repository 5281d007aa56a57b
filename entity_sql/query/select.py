"""SELECT statement builder."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from entity_sql.core.config import CompilerConfig
from entity_sql.core.enums import AliasMode, JoinType, SortDirection
from entity_sql.core.exceptions import QueryBuildError, ValidationError
from entity_sql.core.registry import MetadataRegistry
from entity_sql.query.base import BaseQueryBuilder, QueryResult, T
from entity_sql.query.joins import JoinExpander, JoinRequest, OnClause, project
from entity_sql.query.where import OperatorRegistry, WhereClause, WhereClauseCompiler, with_where

logger = logging.getLogger(__name__)


def _non_negative(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise QueryBuildError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def _join_type(value: JoinType | str | None) -> JoinType | None:
    if value is None:
        return None
    try:
        return JoinType(value.upper() if isinstance(value, str) else value)
    except ValueError:
        raise ValidationError(f"Invalid join type: {value!r}") from None


class SelectQueryBuilder(BaseQueryBuilder[T]):
    """Fluent builder for SELECT statements.

    Example:
        sql, params = (
            SelectQueryBuilder(Pet)
            .where({"id": {"$gte": 5}})
            .relation("reminders")
            .order_by("name", "ASC")
            .limit(10)
            .build()
        )
    """

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
        operators: OperatorRegistry | None = None,
    ) -> None:
        super().__init__(entity, registry, config)
        self._where_compiler = WhereClauseCompiler(operators, self._config)
        self._join_expander = JoinExpander(self._registry, self._config)
        self._conditions: WhereClause | None = None
        self._joins: list[JoinRequest] = []
        self._order_by: dict[str, SortDirection] = {}
        self._limit: int | None = None
        self._offset: int | None = None
        self._alias: str | None = None

    def where(self, conditions: WhereClause) -> SelectQueryBuilder[T]:
        """Set the WHERE conditions, replacing earlier ones."""
        self._conditions = conditions
        return self

    def relation(
        self,
        relation_name: str,
        join_type: JoinType | str | None = None,
        on: OnClause | None = None,
    ) -> SelectQueryBuilder[T]:
        """Join one relation.

        Args:
            relation_name: Property key of the relation.
            join_type: Join flavour; defaults to the configured join type.
            on: Callable receiving the join alias and returning an extra
                predicate ANDed into the ON clause.
        """
        self._joins.append(JoinRequest(relation_name, _join_type(join_type), on))
        return self

    def relations(self, relation_names: Iterable[str]) -> SelectQueryBuilder[T]:
        """Join several relations with the default join type."""
        for name in relation_names:
            self.relation(name)
        return self

    def order_by(
        self, property_key: str, direction: SortDirection | str = SortDirection.ASC
    ) -> SelectQueryBuilder[T]:
        """Add an ORDER BY entry; entries keep insertion order."""
        try:
            sort = SortDirection(direction.upper() if isinstance(direction, str) else direction)
        except ValueError:
            raise ValidationError(f"Invalid sort direction: {direction!r}") from None
        self._order_by[property_key] = sort
        return self

    def limit(self, count: int) -> SelectQueryBuilder[T]:
        self._limit = _non_negative(count, "LIMIT")
        return self

    def offset(self, count: int) -> SelectQueryBuilder[T]:
        self._offset = _non_negative(count, "OFFSET")
        return self

    def alias(self, name: str) -> SelectQueryBuilder[T]:
        """Override the primary table alias (defaults to the table name)."""
        if not name:
            raise ValidationError("Alias cannot be empty")
        self._alias = name
        return self

    def build(self) -> QueryResult:
        table = self._table()
        alias = self._alias or table.name
        separator = self._config.column_alias_separator

        columns = project(table, alias, alias, separator)
        join_clauses: list[str] = []
        for request in self._joins:
            expanded = self._join_expander.expand(table, alias, request)
            columns.extend(expanded.columns)
            join_clauses.append(expanded.clause)

        parts = [f"SELECT {', '.join(columns)} FROM {table.name} {alias}"]
        parts.extend(join_clauses)
        statement = " ".join(parts)

        where = self._where_compiler.compile(
            table, self._conditions, AliasMode.TABLE_NAME, alias=alias
        )
        statement = with_where(statement, where)

        if self._order_by:
            ordering = []
            for property_key, direction in self._order_by.items():
                column = table.column_for(property_key)
                column_name = column.name if column is not None else property_key
                ordering.append(f"{alias}.{column_name} {direction.value}")
            statement = f"{statement} ORDER BY {', '.join(ordering)}"

        if self._limit is not None:
            statement = f"{statement} LIMIT {self._limit}"
        if self._offset is not None:
            statement = f"{statement} OFFSET {self._offset}"

        logger.debug(
            "Built SELECT for '%s' (%d joins, %d params)",
            table.name,
            len(join_clauses),
            len(where.params),
        )
        return QueryResult(statement, where.params)

    def __repr__(self) -> str:
        joins = [request.relation_name for request in self._joins]
        return f"SelectQueryBuilder({self._entity.__name__}, joins={joins})"
