"""Relation join expansion.

Turns a requested relation into the extra projection columns and the JOIN
clause a SELECT needs. Joins only widen the row shape; rebuilding nested
objects from the widened rows is left to the caller.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from entity_sql.core.config import DEFAULT_CONFIG, CompilerConfig
from entity_sql.core.enums import JoinType
from entity_sql.core.exceptions import InvalidRelationError
from entity_sql.core.metadata import TableMetadata
from entity_sql.core.registry import MetadataRegistry

OnClause = Callable[[str], str]


@dataclass(frozen=True)
class JoinRequest:
    """A relation the caller asked to join."""

    relation_name: str
    join_type: JoinType | None = None
    on: OnClause | None = None


@dataclass(frozen=True)
class ExpandedJoin:
    """Projection columns and JOIN clause produced for one relation."""

    columns: tuple[str, ...]
    clause: str


def project(table: TableMetadata, source_alias: str, output_alias: str, separator: str) -> list[str]:
    """``source.col AS output<sep>col`` for every column of *table*."""
    return [
        f"{source_alias}.{column.name} AS {output_alias}{separator}{column.name}"
        for column in table.columns
    ]


class JoinExpander:
    """Expands relation names into projection columns and JOIN clauses."""

    def __init__(self, registry: MetadataRegistry, config: CompilerConfig | None = None) -> None:
        self._registry = registry
        self._config = config if config is not None else DEFAULT_CONFIG

    def expand(self, table: TableMetadata, alias: str, request: JoinRequest) -> ExpandedJoin:
        """Expand one requested relation of *table*.

        The target's columns are aliased with the relation's property key,
        so their projection aliases stay distinct. The JOIN clause itself
        names the target by its bare table name with no alias, so two
        relations to the same table, or a relation back to the source
        table, yield an ambiguous table reference that most engines reject.

        Raises:
            InvalidRelationError: If *table* has no such relation.
            MetadataNotFoundError: If the relation target is not registered.
        """
        relation = table.relation_for(request.relation_name)
        if relation is None:
            raise InvalidRelationError(table.name, request.relation_name)

        target = self._registry.get_table(relation.resolve_target())
        join_alias = relation.target_table
        columns = project(
            target, join_alias, relation.property_key, self._config.column_alias_separator
        )

        join_type = JoinType(request.join_type or self._config.default_join_type)
        condition = f"{alias}.{relation.self_reference} = {join_alias}.{relation.target_column}"
        if request.on is not None:
            extra = request.on(join_alias)
            if extra:
                condition = f"{condition} AND {extra}"

        clause = f"{join_type.keyword} {relation.target_table} ON {condition}"
        return ExpandedJoin(columns=tuple(columns), clause=clause)
