"""Domain services for the DataStore engine.

Exports:
    - PredicateEvaluator: AND-chain WHERE evaluation
    - SnapshotTransactionManager, MockTransaction: Snapshot/restore transactions
    - MigrationRunner, MigrationReport: Idempotent migration replay
"""

from lcplatform.domain.services.migration_runner import MigrationReport, MigrationRunner
from lcplatform.domain.services.predicate_evaluator import (
    UNSET,
    Condition,
    PredicateEvaluator,
    compare,
    parse_conditions,
)
from lcplatform.domain.services.transaction_manager import (
    MockTransaction,
    SnapshotTransactionManager,
    StatementRunner,
)

__all__ = [
    "PredicateEvaluator",
    "Condition",
    "parse_conditions",
    "compare",
    "UNSET",
    "SnapshotTransactionManager",
    "MockTransaction",
    "StatementRunner",
    "MigrationRunner",
    "MigrationReport",
]
