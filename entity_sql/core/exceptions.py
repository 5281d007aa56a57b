"""entity_sql exception hierarchy.

Every error raised by the library derives from EntitySQLError. All of them
signal a schema or usage defect and are surfaced synchronously; nothing is
retried internally.
"""

from __future__ import annotations


class EntitySQLError(Exception):
    """Base exception for all entity_sql errors."""


# --- Metadata ---


class MetadataError(EntitySQLError):
    """Base for metadata registry errors."""


class ValidationError(MetadataError):
    """Raised on malformed registration input."""


class DuplicateDefinitionError(ValidationError):
    """Raised when a column or relation key is registered twice for one entity."""

    def __init__(self, entity: str, kind: str, key: str) -> None:
        self.entity = entity
        self.kind = kind
        self.key = key
        super().__init__(f"Duplicate {kind} '{key}' on entity {entity}")


class MetadataNotFoundError(MetadataError):
    """Raised when an entity type has no finalized table metadata."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"Metadata not found for entity: {entity}")


# --- Query building ---


class QueryError(EntitySQLError):
    """Base for statement building errors."""


class InvalidRelationError(QueryError):
    """Raised when a join is requested for a relation the table does not declare."""

    def __init__(self, table_name: str, relation_name: str) -> None:
        self.table_name = table_name
        self.relation_name = relation_name
        super().__init__(f"Relation '{relation_name}' is not defined on table '{table_name}'")


class UnsupportedOperatorError(QueryError):
    """Raised for an unknown ``$`` operator token."""

    def __init__(self, operator: str) -> None:
        self.operator = operator
        super().__init__(f"Unsupported operator: {operator}")


class QueryBuildError(QueryError):
    """Raised when a builder is used without the data it needs."""


# --- Mapping ---


class MappingError(EntitySQLError):
    """Base for row mapping errors."""


class TransformationError(MappingError):
    """Raised when a value transformer fails."""

    def __init__(self, column: str, direction: str, detail: str) -> None:
        self.column = column
        self.direction = direction
        super().__init__(f"Transformer '{direction}' failed for column '{column}': {detail}")


class EntityConstructionError(MappingError):
    """Raised when an entity type cannot be instantiated without arguments."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        super().__init__(f"Cannot construct {entity}: {detail}")
