"""UPDATE statement builder."""

from __future__ import annotations

import logging
from typing import Any

from entity_sql.core.config import CompilerConfig
from entity_sql.core.enums import AliasMode
from entity_sql.core.exceptions import QueryBuildError
from entity_sql.core.registry import MetadataRegistry
from entity_sql.query.base import (
    BaseQueryBuilder,
    QueryResult,
    T,
    present_keys,
    read_value,
    stored_value,
)
from entity_sql.query.where import OperatorRegistry, WhereClause, WhereClauseCompiler, with_where

logger = logging.getLogger(__name__)


class UpdateQueryBuilder(BaseQueryBuilder[T]):
    """Builder for UPDATE statements.

    Only properties present in the partial update (and not flagged
    ``exclude_from_update``) are written, in column registration order.
    Without WHERE conditions the statement updates every row.
    """

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
        operators: OperatorRegistry | None = None,
        alias_mode: AliasMode = AliasMode.TABLE_NAME,
    ) -> None:
        super().__init__(entity, registry, config)
        self._where_compiler = WhereClauseCompiler(operators, self._config)
        self._alias_mode = AliasMode(alias_mode)
        self._values: Any = None
        self._conditions: WhereClause | None = None

    def set(self, values: Any) -> UpdateQueryBuilder[T]:
        """Partial update: a mapping or an entity with some properties set."""
        self._values = values
        return self

    def where(self, conditions: WhereClause) -> UpdateQueryBuilder[T]:
        self._conditions = conditions
        return self

    def build(self) -> QueryResult:
        """Compile the UPDATE.

        Raises:
            QueryBuildError: If no updatable column is left.
        """
        table = self._table()
        supplied = present_keys(self._values) if self._values is not None else set()

        assignments: list[str] = []
        params: list[Any] = []
        for column in table.columns:
            if column.exclude_from_update or column.property_key not in supplied:
                continue
            assignments.append(f"{column.name} = ?")
            params.append(stored_value(column, read_value(self._values, column.property_key)))

        if not assignments:
            raise QueryBuildError(f"No updatable columns supplied for UPDATE on '{table.name}'")

        where = self._where_compiler.compile(table, self._conditions, self._alias_mode)
        statement = with_where(f"UPDATE {table.name} SET {', '.join(assignments)}", where)
        params.extend(where.params)

        logger.debug("Built UPDATE for '%s' (%d params)", table.name, len(params))
        return QueryResult(statement, tuple(params))
