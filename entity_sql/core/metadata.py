"""Table, column and relation metadata.

Frozen dataclasses describing how an entity type maps onto a table.
Instances are produced by MetadataRegistry and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

from entity_sql.core.enums import RelationKind
from entity_sql.core.transformers import ValueTransformer


@dataclass(frozen=True)
class DirectTarget:
    """Relation target given as the entity type itself."""

    entity: type

    def resolve(self) -> type:
        return self.entity


@dataclass(frozen=True)
class DeferredTarget:
    """Relation target given as a zero-argument resolver.

    Used to break circular references between two mutually relating
    entities; the resolver runs at query-build time only.
    """

    resolver: Callable[[], type]

    def resolve(self) -> type:
        return self.resolver()


TargetRef = Union[DirectTarget, DeferredTarget]


def target_ref(target: Any) -> TargetRef:
    """Wrap a class or a resolver callable into a TargetRef."""
    if isinstance(target, (DirectTarget, DeferredTarget)):
        return target
    if isinstance(target, type):
        return DirectTarget(target)
    if callable(target):
        return DeferredTarget(target)
    raise TypeError(f"Relation target must be a class or a callable, got {target!r}")


@dataclass(frozen=True)
class ColumnMetadata:
    """Mapping of one entity property onto one table column."""

    property_key: str
    name: str
    transformer: ValueTransformer | None = None
    exclude_from_insert: bool = False
    exclude_from_update: bool = False

    def to_stored(self, value: Any) -> Any:
        """Apply the ``to`` transformer; ``None`` always stays ``None``."""
        if value is None:
            return None
        if self.transformer is None:
            return value
        return self.transformer.to(value)


@dataclass(frozen=True)
class RelationMetadata:
    """Foreign-key style link between two tables, used for joins."""

    kind: RelationKind
    property_key: str
    self_reference: str
    target_table: str
    target_column: str
    target: TargetRef

    def resolve_target(self) -> type:
        return self.target.resolve()


@dataclass(frozen=True)
class TableMetadata:
    """Finalized description of an entity's table mapping."""

    entity: type
    name: str
    columns: tuple[ColumnMetadata, ...]
    relations: tuple[RelationMetadata, ...] = field(default_factory=tuple)

    def column_for(self, property_key: str) -> ColumnMetadata | None:
        """Column registered for *property_key*, if any."""
        for column in self.columns:
            if column.property_key == property_key:
                return column
        return None

    def relation_for(self, property_key: str) -> RelationMetadata | None:
        """Relation registered under *property_key*, if any."""
        for relation in self.relations:
            if relation.property_key == property_key:
                return relation
        return None

    @property
    def property_keys(self) -> list[str]:
        return [column.property_key for column in self.columns]
