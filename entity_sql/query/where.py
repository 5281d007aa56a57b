"""WHERE clause compilation.

A condition set maps property keys to either a Literal (equality) or an
Operator (``$gt``, ``$in``, ...). Plain values and ``{"$op": operand}``
dicts are accepted as shorthand and normalized into those two variants.

Operators are dispatched through an OperatorRegistry, so new operators
can be added without touching the compiler:

    def between(column, operand, transform):
        low, high = operand
        return Fragment(f"{column} BETWEEN ? AND ?", (transform(low), transform(high)))

    default_operators.register("$between", between)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union

from entity_sql.core.config import DEFAULT_CONFIG, CompilerConfig
from entity_sql.core.enums import AliasMode
from entity_sql.core.exceptions import (
    QueryBuildError,
    UnsupportedOperatorError,
    ValidationError,
)
from entity_sql.core.metadata import TableMetadata
from entity_sql.query.base import EMPTY_RESULT, QueryResult, placeholders, stored_value

logger = logging.getLogger(__name__)

OPERATOR_PREFIX = "$"


# ---------------------------------------------------------------------------
# Condition values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """Compare the column for equality with ``value``."""

    value: Any


@dataclass(frozen=True)
class Operator:
    """Apply the operator ``token`` to the column with ``operand``."""

    token: str
    operand: Any


ConditionValue = Union[Literal, Operator]
WhereClause = Mapping[str, Any]


def eq(value: Any) -> Operator:
    return Operator("$eq", value)


def gt(value: Any) -> Operator:
    return Operator("$gt", value)


def lt(value: Any) -> Operator:
    return Operator("$lt", value)


def gte(value: Any) -> Operator:
    return Operator("$gte", value)


def lte(value: Any) -> Operator:
    return Operator("$lte", value)


def not_(value: Any) -> Operator:
    return Operator("$not", value)


def like(pattern: str) -> Operator:
    return Operator("$like", pattern)


def is_null(flag: bool = True) -> Operator:
    """``IS NULL`` when *flag* is true, ``IS NOT NULL`` otherwise."""
    return Operator("$null", flag)


def in_(values: Iterable[Any]) -> Operator:
    return Operator("$in", list(values))


# ---------------------------------------------------------------------------
# Operator registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Fragment:
    """One compiled predicate and the parameters it binds."""

    condition: str
    params: tuple[Any, ...] = ()


Transform = Callable[[Any], Any]


class OperatorHandler(Protocol):
    def __call__(self, column: str, operand: Any, transform: Transform) -> Fragment: ...


def _comparison(symbol: str) -> OperatorHandler:
    def handle(column: str, operand: Any, transform: Transform) -> Fragment:
        return Fragment(f"{column} {symbol} ?", (transform(operand),))

    return handle


def _like(column: str, operand: Any, transform: Transform) -> Fragment:
    # Patterns are bound verbatim.
    return Fragment(f"{column} LIKE ?", (operand,))


def _null(column: str, operand: Any, transform: Transform) -> Fragment:
    if operand:
        return Fragment(f"{column} IS NULL")
    return Fragment(f"{column} IS NOT NULL")


def _in(column: str, operand: Any, transform: Transform) -> Fragment:
    if isinstance(operand, (str, bytes)) or not isinstance(operand, Iterable):
        raise QueryBuildError(f"$in operand for '{column}' must be a sequence of values")
    values = list(operand)
    if not values:
        return Fragment("1 = 0")
    return Fragment(
        f"{column} IN ({placeholders(len(values))})",
        tuple(transform(value) for value in values),
    )


class OperatorRegistry:
    """Maps operator tokens to handlers."""

    def __init__(self, handlers: Mapping[str, OperatorHandler] | None = None) -> None:
        self._handlers: dict[str, OperatorHandler] = dict(handlers or {})

    def register(self, token: str, handler: OperatorHandler) -> None:
        """Register or replace the handler for *token*."""
        if not token.startswith(OPERATOR_PREFIX):
            raise ValueError(f"Operator token must start with '{OPERATOR_PREFIX}': {token!r}")
        self._handlers[token] = handler

    def get(self, token: str) -> OperatorHandler:
        """Handler for *token*.

        Raises:
            UnsupportedOperatorError: If no handler is registered.
        """
        try:
            return self._handlers[token]
        except KeyError:
            raise UnsupportedOperatorError(token) from None

    def has(self, token: str) -> bool:
        return token in self._handlers

    def copy(self) -> OperatorRegistry:
        """Independent registry seeded with the same handlers."""
        return OperatorRegistry(self._handlers)

    @property
    def tokens(self) -> list[str]:
        return list(self._handlers)


def _builtin_operators() -> OperatorRegistry:
    registry = OperatorRegistry()
    registry.register("$eq", _comparison("="))
    registry.register("$gt", _comparison(">"))
    registry.register("$lt", _comparison("<"))
    registry.register("$gte", _comparison(">="))
    registry.register("$lte", _comparison("<="))
    registry.register("$not", _comparison("!="))
    registry.register("$like", _like)
    registry.register("$null", _null)
    registry.register("$in", _in)
    return registry


default_operators = _builtin_operators()


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


def _operator_keys(value: Mapping[Any, Any]) -> list[str]:
    return [key for key in value if isinstance(key, str) and key.startswith(OPERATOR_PREFIX)]


class WhereClauseCompiler:
    """Compiles a condition set into a predicate fragment and its params.

    The returned query holds the predicates joined with ``AND`` and no
    ``WHERE`` keyword; an empty condition set yields an empty query.

    Args:
        operators: Operator registry to dispatch through. Defaults to the
            process-wide registry holding the built-in operators.
        config: Compiler configuration.
    """

    def __init__(
        self,
        operators: OperatorRegistry | None = None,
        config: CompilerConfig | None = None,
    ) -> None:
        self._operators = operators if operators is not None else default_operators
        self._config = config if config is not None else DEFAULT_CONFIG

    def normalize(self, property_key: str, value: Any) -> ConditionValue:
        """Turn a raw condition value into a Literal or an Operator."""
        if isinstance(value, (Literal, Operator)):
            return value
        if not isinstance(value, Mapping) or not value:
            return Literal(value)

        keys = _operator_keys(value)
        if not keys:
            return Literal(value)
        if len(keys) > 1:
            if self._config.strict_conditions:
                raise ValidationError(
                    f"Condition on '{property_key}' has several operators {keys}; "
                    "only one operator per property is allowed"
                )
            logger.warning(
                "Condition on '%s' has several operators %s; using '%s' only",
                property_key,
                keys,
                keys[0],
            )
        return Operator(keys[0], value[keys[0]])

    def compile(
        self,
        table: TableMetadata,
        conditions: WhereClause | None,
        alias_mode: AliasMode = AliasMode.NONE,
        alias: str | None = None,
    ) -> QueryResult:
        """Compile *conditions* against *table*.

        Args:
            table: Metadata used to resolve property keys to columns.
            conditions: Property key -> literal value or operator.
            alias_mode: ``TABLE_NAME`` qualifies columns with ``alias``.
            alias: Qualifier for ``TABLE_NAME`` mode; defaults to the table name.

        Raises:
            UnsupportedOperatorError: For an unknown operator token.
            ValidationError: In strict mode, for unknown properties or
                several operators on one property.
        """
        if not conditions:
            return EMPTY_RESULT

        prefix = ""
        if AliasMode(alias_mode) is AliasMode.TABLE_NAME:
            prefix = f"{alias or table.name}."

        parts: list[str] = []
        params: list[Any] = []
        for property_key, raw_value in conditions.items():
            column = table.column_for(property_key)
            if column is None:
                if self._config.strict_conditions:
                    raise ValidationError(
                        f"'{property_key}' is not a column of table '{table.name}'"
                    )
                logger.warning(
                    "'%s' is not a registered column of '%s'; using it verbatim",
                    property_key,
                    table.name,
                )
                column_name = property_key
            else:
                column_name = column.name

            def transform(value: Any, _column=column) -> Any:
                return stored_value(_column, value)

            condition = self.normalize(property_key, raw_value)
            reference = f"{prefix}{column_name}"
            if isinstance(condition, Literal):
                fragment = Fragment(f"{reference} = ?", (transform(condition.value),))
            else:
                handler = self._operators.get(condition.token)
                fragment = handler(reference, condition.operand, transform)

            parts.append(fragment.condition)
            params.extend(fragment.params)

        return QueryResult(" AND ".join(parts), tuple(params))


def with_where(statement: str, where: QueryResult) -> str:
    """Append ``WHERE <predicates>`` to *statement* when there are any."""
    if not where.query:
        return statement
    return f"{statement} WHERE {where.query}"
