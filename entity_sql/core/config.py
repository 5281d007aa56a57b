"""Compiler configuration.

CompilerConfig is a Pydantic model shared by the statement builders, the
query factory and the entity mapper.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from entity_sql.core.enums import JoinType


class CompilerConfig(BaseModel):
    """Configuration for statement compilation and row mapping."""

    model_config = ConfigDict(frozen=True)

    default_join_type: JoinType = JoinType.LEFT
    strict_conditions: bool = False
    column_alias_separator: str = "_"

    @field_validator("column_alias_separator")
    @classmethod
    def _separator_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("column_alias_separator must not be empty")
        return value


DEFAULT_CONFIG = CompilerConfig()
