"""Shared pieces of the statement builders."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, NamedTuple, Protocol, TypeVar

from entity_sql.core.config import DEFAULT_CONFIG, CompilerConfig
from entity_sql.core.exceptions import TransformationError
from entity_sql.core.metadata import ColumnMetadata, TableMetadata
from entity_sql.core.registry import MetadataRegistry, get_default_registry

T = TypeVar("T")

PLACEHOLDER = "?"


class QueryResult(NamedTuple):
    """Parameterized statement: one ``params`` entry per ``?`` in ``query``."""

    query: str
    params: tuple[Any, ...]


EMPTY_RESULT = QueryResult("", ())


class QueryBuilder(Protocol):
    """Anything that compiles to a QueryResult."""

    def build(self) -> QueryResult:
        """Compile the accumulated state into a statement."""
        ...


def stored_value(column: ColumnMetadata | None, value: Any) -> Any:
    """Convert a domain value for binding, applying the column transformer."""
    if value is None:
        return None
    if column is None:
        return value
    try:
        return column.to_stored(value)
    except Exception as e:
        raise TransformationError(column.name, "to", str(e)) from e


def placeholders(count: int) -> str:
    """``?, ?, ?`` with *count* placeholders."""
    return ", ".join([PLACEHOLDER] * count)


class BaseQueryBuilder(Generic[T]):
    """Holds the entity type, registry and config every builder needs."""

    def __init__(
        self,
        entity: type[T],
        registry: MetadataRegistry | None = None,
        config: CompilerConfig | None = None,
    ) -> None:
        self._entity = entity
        self._registry = registry if registry is not None else get_default_registry()
        self._config = config if config is not None else DEFAULT_CONFIG

    @property
    def entity(self) -> type[T]:
        return self._entity

    def _table(self) -> TableMetadata:
        return self._registry.get_table(self._entity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entity.__name__})"


def read_value(source: Any, property_key: str) -> Any:
    """Value of *property_key* on an entity or mapping; None when absent."""
    if isinstance(source, Mapping):
        return source.get(property_key)
    return getattr(source, property_key, None)


def present_keys(source: Any) -> set[str]:
    """Property keys explicitly set on a partial entity or mapping."""
    if isinstance(source, Mapping):
        return set(source.keys())
    fields_set = getattr(source, "model_fields_set", None)
    if fields_set is not None:
        return set(fields_set)
    return set(vars(source).keys())
