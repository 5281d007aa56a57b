"""Mapping layer - transform row dicts into entity instances."""

from __future__ import annotations

from entity_sql.mapping.entity import EntityMapper, map_row
from entity_sql.mapping.protocol import Mapper

__all__ = [
    "Mapper",
    "EntityMapper",
    "map_row",
]
