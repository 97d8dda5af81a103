"""Value objects for the DataStore domain.

Value objects are immutable or identity-less types that describe
statements, results and transaction states.

Exports:
    - Scalar, Row: Dynamically-typed row model
    - StatementKind, ComparisonOp: Statement vocabulary
    - IsolationLevel, TransactionState: Transaction vocabulary
    - ExecuteResult, Migration: Operation inputs and outputs
"""

from lcplatform.domain.value_objects.datastore_types import (
    ComparisonOp,
    ExecuteResult,
    IsolationLevel,
    Migration,
    Row,
    Scalar,
    StatementKind,
    TransactionState,
)

__all__ = [
    "Scalar",
    "Row",
    "StatementKind",
    "ComparisonOp",
    "IsolationLevel",
    "TransactionState",
    "ExecuteResult",
    "Migration",
]
