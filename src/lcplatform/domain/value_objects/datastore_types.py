"""DataStore value types.

Provider-agnostic vocabulary shared by the DataStore ports and the
in-memory engine: rows, statement results, migrations and the
transaction lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, auto
from typing import Union

Scalar = Union[str, int, float, bool, None, datetime, date]
"""A dynamically-typed column value."""

Row = dict[str, Scalar]
"""One record: column name to value. An absent key is an unset column."""


class StatementKind(Enum):
    """Kinds of statement the engine can route."""

    SELECT = "select"
    CREATE_TABLE = "create_table"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"

    def is_mutation(self) -> bool:
        """Check if this kind changes the store."""
        return self in (
            StatementKind.CREATE_TABLE,
            StatementKind.INSERT,
            StatementKind.UPDATE,
            StatementKind.DELETE,
        )


class ComparisonOp(Enum):
    """Comparison operators accepted in WHERE conditions."""

    EQ = "="
    NE = "!="
    NE_ALT = "<>"
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @classmethod
    def from_token(cls, token: str) -> ComparisonOp | None:
        """Map an operator token to an operator, or None if unsupported."""
        try:
            return cls(token)
        except ValueError:
            return None


class IsolationLevel(Enum):
    """Transaction isolation levels.

    Part of the DataStore vocabulary for real backends. The in-memory
    engine runs every transaction against the live store and ignores it.
    """

    READ_UNCOMMITTED = "read_uncommitted"
    READ_COMMITTED = "read_committed"
    REPEATABLE_READ = "repeatable_read"
    SERIALIZABLE = "serializable"


class TransactionState(Enum):
    """Transaction lifecycle states.

        IDLE ──begin()──> ACTIVE ──┬── body returns / commit() ──> COMMITTED
                                   └── rollback()/raise ──> ROLLED_BACK
    """

    IDLE = auto()
    """Transaction object exists but no snapshot was taken."""

    ACTIVE = auto()
    """Snapshot taken; statements run against the live store."""

    COMMITTED = auto()
    """Body returned normally. Applied mutations stand."""

    ROLLED_BACK = auto()
    """Snapshot restored. An error was raised to the caller."""

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (TransactionState.COMMITTED, TransactionState.ROLLED_BACK)


@dataclass(frozen=True)
class ExecuteResult:
    """Result of a write statement."""

    rows_affected: int
    insert_id: int | str | None = None


@dataclass
class Migration:
    """A named, versioned schema change.

    Versions are compared by exact string equality. ``down`` is stored
    but never run by the engine.
    """

    version: str
    up: str
    down: str = ""
    description: str = ""
    applied_at: datetime | None = None
