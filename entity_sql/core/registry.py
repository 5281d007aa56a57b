"""Metadata registry - maps entity types to their table metadata.

Registration happens in two phases. Property-level calls
(``register_column`` / ``register_relation``) accumulate in a pending
buffer keyed by entity type; the class-level ``register_table`` call
flushes that buffer into an immutable TableMetadata. Table metadata is
write-once: later ``register_table`` calls for the same type are no-ops.

The registry expects a single writer during program initialization and
holds no locks.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from entity_sql.core.enums import RelationKind
from entity_sql.core.exceptions import (
    DuplicateDefinitionError,
    MetadataNotFoundError,
    ValidationError,
)
from entity_sql.core.metadata import (
    ColumnMetadata,
    RelationMetadata,
    TableMetadata,
    target_ref,
)
from entity_sql.core.transformers import ValueTransformer

logger = logging.getLogger(__name__)


def _entity_name(entity: type) -> str:
    return getattr(entity, "__qualname__", repr(entity))


def _require_text(value: Any, what: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} cannot be empty")


class MetadataRegistry:
    """In-memory store of table, column and relation metadata.

    Example:
        registry = MetadataRegistry()
        registry.register_column(Pet, "id", "id")
        registry.register_table(Pet, "pets")
        registry.get_table(Pet).name  # "pets"
    """

    def __init__(self) -> None:
        self._tables: dict[type, TableMetadata] = {}
        self._pending_columns: dict[type, list[ColumnMetadata]] = {}
        self._pending_relations: dict[type, list[RelationMetadata]] = {}

    # --- Registration ---

    def register_column(
        self,
        entity: type,
        property_key: str,
        column_name: str,
        transformer: ValueTransformer | None = None,
        exclude_from_insert: bool = False,
        exclude_from_update: bool = False,
    ) -> None:
        """Append a column to the entity's pending buffer.

        Calls for an entity whose table is already finalized are ignored.

        Raises:
            ValidationError: If the property key or column name is empty.
            DuplicateDefinitionError: If the column name or property key is
                already pending for this entity.
        """
        if entity in self._tables:
            logger.debug(
                "Table for %s already finalized; ignoring column %s",
                _entity_name(entity),
                property_key,
            )
            return

        _require_text(property_key, "Column property key")
        _require_text(column_name, "Column name")

        pending = self._pending_columns.setdefault(entity, [])
        for existing in pending:
            if existing.property_key == property_key:
                raise DuplicateDefinitionError(_entity_name(entity), "property key", property_key)
            if existing.name == column_name:
                raise DuplicateDefinitionError(_entity_name(entity), "column", column_name)

        pending.append(
            ColumnMetadata(
                property_key=property_key,
                name=column_name,
                transformer=transformer,
                exclude_from_insert=exclude_from_insert,
                exclude_from_update=exclude_from_update,
            )
        )

    def register_relation(self, entity: type, relation: RelationMetadata) -> None:
        """Validate a relation and append it to the entity's pending buffer.

        Calls for an entity whose table is already finalized are ignored.

        Raises:
            ValidationError: If a field is empty or the kind is unknown.
            DuplicateDefinitionError: If the property key is already pending.
        """
        if entity in self._tables:
            logger.debug(
                "Table for %s already finalized; ignoring relation %s",
                _entity_name(entity),
                relation.property_key,
            )
            return

        try:
            kind = RelationKind(relation.kind)
        except ValueError:
            raise ValidationError(f"Invalid relation type: {relation.kind}") from None

        _require_text(relation.property_key, "Relation property key")
        _require_text(relation.self_reference, "Relation self reference")
        _require_text(relation.target_table, "Relation target table")
        _require_text(relation.target_column, "Relation target column")
        if relation.target is None:
            raise ValidationError("Relation target class cannot be None")

        try:
            target = target_ref(relation.target)
        except TypeError as e:
            raise ValidationError(str(e)) from e

        pending = self._pending_relations.setdefault(entity, [])
        if any(r.property_key == relation.property_key for r in pending):
            raise DuplicateDefinitionError(
                _entity_name(entity), "relation", relation.property_key
            )
        pending.append(dataclasses.replace(relation, kind=kind, target=target))

    def register_table(self, entity: type, table_name: str) -> None:
        """Finalize the entity's pending metadata into a TableMetadata.

        No-op when the entity is already finalized.

        Raises:
            ValidationError: If the name is empty or no column is pending.
        """
        if entity in self._tables:
            logger.debug("Table for %s already registered; ignoring", _entity_name(entity))
            return

        _require_text(table_name, "Table name")
        columns = self._pending_columns.get(entity, [])
        if not columns:
            raise ValidationError(f"Table '{table_name}' must have at least one column")

        relations = self._pending_relations.get(entity, [])
        self._tables[entity] = TableMetadata(
            entity=entity,
            name=table_name,
            columns=tuple(columns),
            relations=tuple(relations),
        )
        self._pending_columns.pop(entity, None)
        self._pending_relations.pop(entity, None)
        logger.debug(
            "Registered table '%s' for %s (%d columns, %d relations)",
            table_name,
            _entity_name(entity),
            len(columns),
            len(relations),
        )

    # --- Lookup ---

    def get_table(self, entity: type) -> TableMetadata:
        """Finalized metadata for *entity*.

        Raises:
            MetadataNotFoundError: If the entity was never finalized.
        """
        try:
            return self._tables[entity]
        except KeyError:
            raise MetadataNotFoundError(_entity_name(entity)) from None

    def has_table(self, entity: type) -> bool:
        """Check if an entity has finalized metadata."""
        return entity in self._tables

    def get_table_by_name(self, name: str) -> TableMetadata | None:
        """First finalized table called *name*, or None."""
        for table in self._tables.values():
            if table.name == name:
                return table
        return None

    def get_column_by_property_key(
        self, table_name: str, property_key: str
    ) -> ColumnMetadata | None:
        """Column of the table called *table_name* mapped to *property_key*."""
        table = self.get_table_by_name(table_name)
        if table is None:
            return None
        return table.column_for(property_key)

    def get_all_tables(self) -> dict[type, TableMetadata]:
        """Copy of the entity -> table mapping."""
        return dict(self._tables)

    def clear(self) -> None:
        """Forget every finalized and pending definition."""
        self._tables.clear()
        self._pending_columns.clear()
        self._pending_relations.clear()

    def __len__(self) -> int:
        """Number of finalized tables."""
        return len(self._tables)

    def __contains__(self, entity: object) -> bool:
        return entity in self._tables


default_registry = MetadataRegistry()


def get_default_registry() -> MetadataRegistry:
    """Process-wide registry used when no registry is passed explicitly."""
    return default_registry
