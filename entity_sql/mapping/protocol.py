"""Structural type for anything that turns result rows into objects.

A row is a flat mapping of projection alias to raw database value.
EntityMapper is the built-in implementation; BaseEntity helpers are
typed against this protocol so callers may substitute their own.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Mapper(Protocol[T]):
    def map_one(self, row: Mapping[str, Any]) -> T:
        """Build one object from a single row."""
        ...

    def map_many(self, rows: Iterable[Mapping[str, Any]]) -> list[T]:
        """Build one object per row, preserving row order."""
        ...
