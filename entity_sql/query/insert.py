"""INSERT statement builder (single row and batch)."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from entity_sql.core.config import CompilerConfig
from entity_sql.core.exceptions import QueryBuildError
from entity_sql.core.registry import MetadataRegistry
from entity_sql.query.base import (
    BaseQueryBuilder,
    QueryResult,
    T,
    placeholders,
    read_value,
    stored_value,
)

logger = logging.getLogger(__name__)


class InsertQueryBuilder(BaseQueryBuilder[T]):
    """Builder for INSERT statements.

    ``values`` inserts one entity; ``values_many`` inserts a batch as a
    multi-row ``VALUES (...), (...)`` list with one flat parameter tuple.
    Columns flagged ``exclude_from_insert`` never appear.
    """

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
    ) -> None:
        super().__init__(entity, registry, config)
        self._rows: list[Any] | None = None

    def values(self, entity: Any) -> InsertQueryBuilder[T]:
        """Insert a single entity (instance or mapping)."""
        self._rows = [entity]
        return self

    def values_many(self, entities: Iterable[Any]) -> InsertQueryBuilder[T]:
        """Insert several entities in one statement."""
        self._rows = list(entities)
        return self

    def build(self) -> QueryResult:
        """Compile the INSERT.

        Raises:
            QueryBuildError: If no values were supplied, the batch is empty,
                or every column is excluded from inserts.
        """
        if self._rows is None:
            raise QueryBuildError("No values supplied for INSERT; call values() or values_many()")
        if not self._rows:
            raise QueryBuildError("Cannot build a batch INSERT from an empty sequence")

        table = self._table()
        columns = [column for column in table.columns if not column.exclude_from_insert]
        if not columns:
            raise QueryBuildError(f"Every column of '{table.name}' is excluded from INSERT")

        group = f"({placeholders(len(columns))})"
        params: list[Any] = []
        for row in self._rows:
            params.extend(
                stored_value(column, read_value(row, column.property_key)) for column in columns
            )

        column_list = ", ".join(column.name for column in columns)
        groups = ", ".join([group] * len(self._rows))
        statement = f"INSERT INTO {table.name}({column_list}) VALUES {groups}"

        logger.debug(
            "Built INSERT for '%s' (%d rows, %d params)", table.name, len(self._rows), len(params)
        )
        return QueryResult(statement, tuple(params))
