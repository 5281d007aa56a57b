"""Declarative registration.

Markers placed in a class body describe columns and relations; the
``@table`` class decorator hands them to a MetadataRegistry in
definition order and then finalizes the table:

    @table("pets")
    class Pet(BaseEntity):
        id = column("id")
        name = column("name")
        birth_date = column("birth_date")
        reminders = one_to_many(
            self_reference="id",
            target_table="reminders",
            target_column="pet_id",
            target=lambda: Reminder,
        )

Reading a marker attribute on an instance where nothing was assigned
yields ``None``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar, Union

from entity_sql.core.enums import RelationKind
from entity_sql.core.metadata import RelationMetadata, TargetRef
from entity_sql.core.registry import MetadataRegistry, get_default_registry
from entity_sql.core.transformers import ValueTransformer
from entity_sql.mapping.entity import EntityMapper
from entity_sql.mapping.protocol import Mapper

E = TypeVar("E", bound=type)

RelationTarget = Union[type, Callable[[], type], TargetRef]

REGISTRY_ATTR = "__entity_registry__"


class _Field:
    """Non-data descriptor: instance values live in ``__dict__``."""

    property_key: str = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.property_key = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(self.property_key)


class Column(_Field):
    """Column marker created by :func:`column`."""

    def __init__(
        self,
        name: str,
        transformer: ValueTransformer | None = None,
        exclude_from_insert: bool = False,
        exclude_from_update: bool = False,
    ) -> None:
        self.name = name
        self.transformer = transformer
        self.exclude_from_insert = exclude_from_insert
        self.exclude_from_update = exclude_from_update

    def __repr__(self) -> str:
        return f"Column({self.name!r})"


class Relation(_Field):
    """Relation marker created by :func:`one_to_many` / :func:`many_to_one`."""

    def __init__(
        self,
        kind: RelationKind,
        self_reference: str,
        target_table: str,
        target_column: str,
        target: RelationTarget,
    ) -> None:
        self.kind = kind
        self.self_reference = self_reference
        self.target_table = target_table
        self.target_column = target_column
        self.target = target

    def metadata(self, property_key: str) -> RelationMetadata:
        return RelationMetadata(
            kind=self.kind,
            property_key=property_key,
            self_reference=self.self_reference,
            target_table=self.target_table,
            target_column=self.target_column,
            target=self.target,  # type: ignore[arg-type]
        )

    def __repr__(self) -> str:
        return f"Relation({self.kind.value}, {self.target_table!r})"


def column(
    name: str,
    transformer: ValueTransformer | None = None,
    exclude_from_insert: bool = False,
    exclude_from_update: bool = False,
) -> Any:
    """Declare a column mapping for the attribute it is assigned to."""
    return Column(name, transformer, exclude_from_insert, exclude_from_update)


def one_to_many(
    self_reference: str, target_table: str, target_column: str, target: RelationTarget
) -> Any:
    return Relation(RelationKind.ONE_TO_MANY, self_reference, target_table, target_column, target)


def many_to_one(
    self_reference: str, target_table: str, target_column: str, target: RelationTarget
) -> Any:
    return Relation(RelationKind.MANY_TO_ONE, self_reference, target_table, target_column, target)


def _markers(cls: type) -> dict[str, _Field]:
    """Markers of *cls* and its bases, base classes first."""
    found: dict[str, _Field] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, _Field):
                found[attr] = value
    return found


def table(name: str, registry: MetadataRegistry | None = None) -> Callable[[E], E]:
    """Class decorator registering the class body's markers as a table."""

    def decorator(cls: E) -> E:
        target_registry = registry if registry is not None else get_default_registry()
        for attr, marker in _markers(cls).items():
            if isinstance(marker, Column):
                target_registry.register_column(
                    cls,
                    attr,
                    marker.name,
                    marker.transformer,
                    marker.exclude_from_insert,
                    marker.exclude_from_update,
                )
            elif isinstance(marker, Relation):
                target_registry.register_relation(cls, marker.metadata(attr))
        target_registry.register_table(cls, name)
        setattr(cls, REGISTRY_ATTR, target_registry)
        return cls

    return decorator


def _registry_of(cls: type) -> MetadataRegistry:
    return getattr(cls, REGISTRY_ATTR, None) or get_default_registry()


def _mapper(cls: type, column_prefix: str | None) -> Mapper[Any]:
    return EntityMapper(cls, _registry_of(cls), column_prefix)


class BaseEntity:
    """Optional base class with mapping and copy helpers."""

    @classmethod
    def to_model(cls, row: Mapping[str, Any], column_prefix: str | None = None) -> Any:
        """Build an instance from one row (see EntityMapper)."""
        return _mapper(cls, column_prefix).map_one(row)

    @classmethod
    def to_models(
        cls, rows: Iterable[Mapping[str, Any]], column_prefix: str | None = None
    ) -> list[Any]:
        return _mapper(cls, column_prefix).map_many(rows)

    def to_plain(self) -> dict[str, Any]:
        """Column property key -> value, for properties assigned on this instance."""
        table_meta = _registry_of(type(self)).get_table(type(self))
        assigned = vars(self)
        return {
            key: assigned[key] for key in table_meta.property_keys if key in assigned
        }

    def clone(self) -> Any:
        """New instance carrying the same column values."""
        copy = type(self)()
        for key, value in self.to_plain().items():
            setattr(copy, key, value)
        return copy

    def __repr__(self) -> str:
        if not _registry_of(type(self)).has_table(type(self)):
            return super().__repr__()
        fields = ", ".join(f"{key}={value!r}" for key, value in self.to_plain().items())
        return f"{type(self).__name__}({fields})"
