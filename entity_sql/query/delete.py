"""DELETE statement builder."""

from __future__ import annotations

import logging

from entity_sql.core.config import CompilerConfig
from entity_sql.core.enums import AliasMode
from entity_sql.core.registry import MetadataRegistry
from entity_sql.query.base import BaseQueryBuilder, QueryResult, T
from entity_sql.query.where import OperatorRegistry, WhereClause, WhereClauseCompiler, with_where

logger = logging.getLogger(__name__)


class DeleteQueryBuilder(BaseQueryBuilder[T]):
    """Builder for DELETE statements. No conditions deletes every row."""

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
        operators: OperatorRegistry | None = None,
        alias_mode: AliasMode = AliasMode.NONE,
    ) -> None:
        super().__init__(entity, registry, config)
        self._where_compiler = WhereClauseCompiler(operators, self._config)
        self._alias_mode = AliasMode(alias_mode)
        self._conditions: WhereClause | None = None

    def where(self, conditions: WhereClause) -> DeleteQueryBuilder[T]:
        self._conditions = conditions
        return self

    def build(self) -> QueryResult:
        table = self._table()
        where = self._where_compiler.compile(table, self._conditions, self._alias_mode)
        statement = with_where(f"DELETE FROM {table.name}", where)
        logger.debug("Built DELETE for '%s' (%d params)", table.name, len(where.params))
        return QueryResult(statement, where.params)
