"""WHERE-clause evaluation for the in-memory engine.

A WHERE clause is an AND-chain of ``<column> <op> $N`` conditions.
Parameters bind to conditions by order of appearance; the digits after
``$`` are ignored.

Conditions that do not have that shape are treated as satisfied. This
keeps the mock permissive for test code, but it means a clause like
``email IN ($1, $2)`` or ``a = $1 OR b = $2`` accepts rows a real
database would reject.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from lcplatform.domain.value_objects import ComparisonOp, Row

_AND_RE = re.compile(r"\s+and\s+", re.IGNORECASE)
_CONDITION_RE = re.compile(r"(\w+)\s*([=<>!]+)\s*\$\d+")


class _Unset:
    """Marker for an absent column or an unbound parameter."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True)
class Condition:
    """One parsed ``column op $N`` comparison.

    ``op`` is None when the operator token is not a supported operator;
    such a condition still consumes a parameter and never matches.
    """

    column: str
    token: str
    op: ComparisonOp | None

    def __str__(self) -> str:
        return f"{self.column} {self.token} $?"


@lru_cache(maxsize=256)
def parse_conditions(where_clause: str) -> tuple[Condition | None, ...]:
    """Split a WHERE clause on AND and parse each segment.

    Segments that do not look like a comparison yield None.
    """
    conditions: list[Condition | None] = []
    for segment in _AND_RE.split(where_clause):
        match = _CONDITION_RE.search(segment.strip())
        if match is None:
            conditions.append(None)
            continue
        token = match.group(2)
        conditions.append(
            Condition(column=match.group(1), token=token, op=ComparisonOp.from_token(token))
        )
    return tuple(conditions)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never treats booleans as numbers."""
    if left is UNSET or right is UNSET:
        return left is right
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def compare(left: Any, op: ComparisonOp, right: Any) -> bool:
    """Apply a comparison operator to a row value and a parameter.

    Ordering comparisons involving None, an unset value, or values of
    incomparable types are false.
    """
    if op == ComparisonOp.EQ:
        return strict_equals(left, right)
    if op in (ComparisonOp.NE, ComparisonOp.NE_ALT):
        return not strict_equals(left, right)

    if left is None or right is None or left is UNSET or right is UNSET:
        return False
    try:
        if op == ComparisonOp.LT:
            return left < right
        elif op == ComparisonOp.LE:
            return left <= right
        elif op == ComparisonOp.GT:
            return left > right
        elif op == ComparisonOp.GE:
            return left >= right
    except TypeError:
        return False
    return False


class PredicateEvaluator:
    """Evaluates AND-chained WHERE clauses against rows."""

    def evaluate(self, row: Row, where_clause: str, params: Sequence[Any]) -> bool:
        """Check whether a row satisfies every condition in the clause.

        Args:
            row: The row to test.
            where_clause: Clause text without the WHERE keyword.
            params: Parameters, consumed in condition order.

        Returns:
            True if all conditions hold.
        """
        param_index = 0
        for condition in parse_conditions(where_clause):
            if condition is None:
                continue
            value = params[param_index] if param_index < len(params) else UNSET
            param_index += 1
            if condition.op is None:
                return False
            if not compare(row.get(condition.column, UNSET), condition.op, value):
                return False
        return True
