"""Enumerations shared by metadata, builders and the WHERE compiler."""

from __future__ import annotations

from enum import Enum


class RelationKind(str, Enum):
    """Supported relation kinds."""

    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"


class SortDirection(str, Enum):
    """ORDER BY direction."""

    ASC = "ASC"
    DESC = "DESC"


class JoinType(str, Enum):
    """Join flavours available for relation expansion."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"

    @property
    def keyword(self) -> str:
        """SQL keyword sequence preceding the joined table."""
        if self is JoinType.FULL:
            return "FULL OUTER JOIN"
        return f"{self.value} JOIN"


class AliasMode(str, Enum):
    """How the WHERE compiler qualifies column references."""

    NONE = "none"
    TABLE_NAME = "table_name"
