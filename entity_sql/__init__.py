"""entity_sql - declarative entity metadata compiled into parameterized SQL."""

from __future__ import annotations

import logging

from entity_sql.core.config import CompilerConfig
from entity_sql.core.enums import AliasMode, JoinType, RelationKind, SortDirection
from entity_sql.core.exceptions import (
    DuplicateDefinitionError,
    EntityConstructionError,
    EntitySQLError,
    InvalidRelationError,
    MappingError,
    MetadataError,
    MetadataNotFoundError,
    QueryBuildError,
    QueryError,
    TransformationError,
    UnsupportedOperatorError,
    ValidationError,
)
from entity_sql.core.metadata import (
    ColumnMetadata,
    DeferredTarget,
    DirectTarget,
    RelationMetadata,
    TableMetadata,
)
from entity_sql.core.registry import MetadataRegistry, default_registry, get_default_registry
from entity_sql.core.transformers import CommonTransformers, ValueTransformer, transformer
from entity_sql.declarative import BaseEntity, column, many_to_one, one_to_many, table
from entity_sql.mapping.entity import EntityMapper, map_row
from entity_sql.mapping.protocol import Mapper
from entity_sql.query import (
    DeleteQueryBuilder,
    InsertQueryBuilder,
    Literal,
    Operator,
    OperatorRegistry,
    QueryBuilderFactory,
    QueryResult,
    SelectQueryBuilder,
    UpdateQueryBuilder,
    WhereClauseCompiler,
    default_operators,
    delete_query,
    insert_query,
    query_builder_factory,
    select_query,
    update_query,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Registry & metadata
    "MetadataRegistry",
    "default_registry",
    "get_default_registry",
    "TableMetadata",
    "ColumnMetadata",
    "RelationMetadata",
    "DirectTarget",
    "DeferredTarget",
    # Declarative
    "table",
    "column",
    "one_to_many",
    "many_to_one",
    "BaseEntity",
    # Transformers
    "ValueTransformer",
    "CommonTransformers",
    "transformer",
    # Config & enums
    "CompilerConfig",
    "AliasMode",
    "JoinType",
    "RelationKind",
    "SortDirection",
    # Query
    "QueryResult",
    "SelectQueryBuilder",
    "InsertQueryBuilder",
    "UpdateQueryBuilder",
    "DeleteQueryBuilder",
    "QueryBuilderFactory",
    "query_builder_factory",
    "select_query",
    "insert_query",
    "update_query",
    "delete_query",
    "WhereClauseCompiler",
    "OperatorRegistry",
    "default_operators",
    "Literal",
    "Operator",
    # Mapping
    "Mapper",
    "EntityMapper",
    "map_row",
    # Exceptions
    "EntitySQLError",
    "MetadataError",
    "ValidationError",
    "DuplicateDefinitionError",
    "MetadataNotFoundError",
    "QueryError",
    "InvalidRelationError",
    "UnsupportedOperatorError",
    "QueryBuildError",
    "MappingError",
    "TransformationError",
    "EntityConstructionError",
]
