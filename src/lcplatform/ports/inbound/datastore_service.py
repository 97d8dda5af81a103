"""DataStore port - relational data contract.

Defines the provider-agnostic interfaces for relational database
operations and the error taxonomy shared by every backend. Real
backends forward to a cloud SDK; the mock backend interprets a SQL
subset in memory.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, TypeVar

from lcplatform.domain.value_objects import ExecuteResult, IsolationLevel, Migration, Row

T = TypeVar("T")

Params = Optional[Sequence[Any]]


class Transaction(Protocol):
    """Handle passed to a transaction body.

    ``query`` and ``execute`` run against the same store as the owning
    service. ``rollback`` always raises after restoring the snapshot, and
    ``commit`` ends a hand-driven transaction.
    """

    @abstractmethod
    async def query(self, sql: str, params: Params = None) -> list[Row]:
        ...

    @abstractmethod
    async def execute(self, sql: str, params: Params = None) -> ExecuteResult:
        ...

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...


class Connection(Protocol):
    """A pooled connection exposing the read and write paths."""

    @abstractmethod
    async def query(self, sql: str, params: Params = None) -> list[Row]:
        ...

    @abstractmethod
    async def execute(self, sql: str, params: Params = None) -> ExecuteResult:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


TransactionBody = Callable[[Transaction], Awaitable[T]]


class DataStoreService(Protocol):
    """Protocol for relational database operations (control plane).

    Parameters use ``$N`` placeholders bound by order of appearance.

    Example:
        await store.connect()
        await store.execute("CREATE TABLE users(id, name)")
        await store.execute("INSERT INTO users (name) VALUES ($1)", ["Alice"])
        rows = await store.query("SELECT name FROM users WHERE name = $1", ["Alice"])
    """

    @abstractmethod
    async def connect(self, connection_string: str | None = None) -> None:
        """Connect to the database.

        Args:
            connection_string: Backend-specific connection string.
        """
        ...

    @abstractmethod
    async def query(self, sql: str, params: Params = None) -> list[Row]:
        """Run a SELECT and return matching rows.

        Args:
            sql: SELECT statement.
            params: Positional parameters.

        Returns:
            Result rows.
        """
        ...

    @abstractmethod
    async def execute(self, sql: str, params: Params = None) -> ExecuteResult:
        """Run a CREATE TABLE, INSERT, UPDATE or DELETE statement.

        Args:
            sql: Statement text.
            params: Positional parameters.

        Returns:
            Affected row count and, for INSERT, the new row id.
        """
        ...

    @abstractmethod
    async def transaction(
        self, fn: TransactionBody[T], isolation_level: IsolationLevel | None = None
    ) -> T:
        """Run ``fn`` inside a transaction.

        Args:
            fn: Coroutine function receiving the transaction handle.
            isolation_level: Requested isolation. Backends that cannot
                honour it may ignore it.

        Returns:
            Whatever ``fn`` returns.

        Raises:
            TransactionRollbackError: If the transaction was rolled back.
        """
        ...

    @abstractmethod
    async def migrate(self, migrations: Sequence[Migration]) -> None:
        """Apply migrations whose version has not been applied yet.

        Args:
            migrations: Migrations in application order.
        """
        ...

    @abstractmethod
    def get_connection(self) -> Connection:
        """Get a connection from the pool."""
        ...


class DataClient(Protocol):
    """Protocol for relational data access from hosted applications (data plane).

    Offers query and transaction operations without database management.
    """

    @abstractmethod
    async def query(self, sql: str, params: Params = None) -> list[Row]:
        ...

    @abstractmethod
    async def execute(self, sql: str, params: Params = None) -> ExecuteResult:
        ...

    @abstractmethod
    async def transaction(
        self, fn: TransactionBody[T], isolation_level: IsolationLevel | None = None
    ) -> T:
        ...


# =============================================================================
# Errors
# =============================================================================


class LCPlatformError(Exception):
    """Base class for all platform errors."""

    def __init__(
        self,
        message: str,
        code: str,
        retryable: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
        self.details = details or {}


class ValidationError(LCPlatformError):
    """Raised when a request is invalid for the current state or input."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", False, details)


class NotConnectedError(ValidationError):
    """Raised when an operation is invoked before ``connect()``."""

    def __init__(self) -> None:
        super().__init__("Not connected to database")


class TransactionRollbackError(LCPlatformError):
    """Raised whenever a transaction is rolled back.

    By the time this is raised the store has already been restored to
    its pre-transaction snapshot.
    """

    def __init__(self, reason: str | None = None) -> None:
        message = "Transaction rolled back"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, "TRANSACTION_ROLLED_BACK", False, {"reason": reason})


class MigrationConflictError(LCPlatformError):
    """Raised when an applied migration version is re-supplied with different content."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Migration {version} was already applied with different 'up' text",
            "MIGRATION_CONFLICT",
            False,
            {"version": version},
        )
