"""Value transformers.

A transformer converts a domain value to its stored representation
(``to``) and back (``from_``). Both directions must be pure.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ValueTransformer(Protocol):
    """Bidirectional conversion between a domain value and a stored value."""

    def to(self, value: Any) -> Any:
        """Domain value -> stored value."""
        ...

    def from_(self, value: Any) -> Any:
        """Stored value -> domain value."""
        ...


@dataclass(frozen=True)
class FunctionTransformer:
    """Transformer assembled from two plain callables."""

    to_func: Callable[[Any], Any]
    from_func: Callable[[Any], Any]

    def to(self, value: Any) -> Any:
        return self.to_func(value)

    def from_(self, value: Any) -> Any:
        return self.from_func(value)


def transformer(to: Callable[[Any], Any], from_: Callable[[Any], Any]) -> FunctionTransformer:
    """Build a transformer from a ``to`` and a ``from_`` callable."""
    return FunctionTransformer(to_func=to, from_func=from_)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class JSONCollectionTransformer:
    """Serializes a collection to JSON text.

    Empty or absent collections are stored as ``None``; a ``None`` (or
    empty string) stored value is revived as a fresh empty collection
    produced by ``empty_factory``.
    """

    empty_factory: Callable[[], Any]

    def to(self, value: Any) -> str | None:
        if _is_empty(value):
            return None
        if isinstance(value, (set, frozenset, tuple)):
            value = list(value)
        return json.dumps(value)

    def from_(self, value: str | bytes | None) -> Any:
        if value is None or value == "" or value == b"":
            return self.empty_factory()
        return json.loads(value)


class CommonTransformers:
    """Ready-made transformers for frequently stored shapes."""

    # Objects or arrays; a NULL column revives as an empty dict.
    JSON = JSONCollectionTransformer(empty_factory=dict)
    # Arrays are revived exactly as stored; items are not coerced.
    NUMBER_ARRAY = JSONCollectionTransformer(empty_factory=list)
    STRING_ARRAY = JSONCollectionTransformer(empty_factory=list)
