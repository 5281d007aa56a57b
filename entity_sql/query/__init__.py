"""Query layer - compile entity metadata into parameterized SQL."""

from __future__ import annotations

from entity_sql.query.base import QueryBuilder, QueryResult
from entity_sql.query.delete import DeleteQueryBuilder
from entity_sql.query.factory import (
    QueryBuilderFactory,
    delete_query,
    insert_query,
    query_builder_factory,
    select_query,
    update_query,
)
from entity_sql.query.insert import InsertQueryBuilder
from entity_sql.query.joins import JoinExpander, JoinRequest
from entity_sql.query.select import SelectQueryBuilder
from entity_sql.query.update import UpdateQueryBuilder
from entity_sql.query.where import (
    Fragment,
    Literal,
    Operator,
    OperatorRegistry,
    WhereClauseCompiler,
    default_operators,
)

__all__ = [
    "QueryResult",
    "QueryBuilder",
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
    "JoinExpander",
    "JoinRequest",
    "WhereClauseCompiler",
    "OperatorRegistry",
    "default_operators",
    "Fragment",
    "Literal",
    "Operator",
]
