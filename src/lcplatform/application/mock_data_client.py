"""Mock DataClient - in-memory data plane for hosted applications.

Runs on the same engine as MockDataStoreService but needs no connect
step. Transactions use deep snapshots so a failed transaction also
undoes in-place updates, ids come from a per-table counter, and nested
transactions are rejected.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, TypeVar

from lcplatform.application.mock_datastore_service import MockDataStoreService
from lcplatform.domain.services import MockTransaction
from lcplatform.domain.value_objects import ExecuteResult, IsolationLevel, Row
from lcplatform.infrastructure.config import DataStoreConfig, get_config
from lcplatform.infrastructure.metrics import MetricsRegistry
from lcplatform.ports.inbound.datastore_service import TransactionBody, ValidationError

T = TypeVar("T")


class ClientTransaction:
    """Transaction handle whose statements go through the client's own checks."""

    def __init__(self, client: MockDataClient, tx: MockTransaction) -> None:
        self._client = client
        self._tx = tx

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        return await self._client.query(sql, params)

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        return await self._client.execute(sql, params)

    async def commit(self) -> None:
        await self._tx.commit()

    async def rollback(self) -> None:
        await self._tx.rollback()


class MockDataClient:
    """In-memory implementation of the DataClient port."""

    def __init__(
        self,
        config: DataStoreConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        base = config or get_config().datastore
        self._engine = MockDataStoreService(
            config=base.model_copy(update={"snapshot_mode": "deep", "id_strategy": "monotonic"}),
            metrics=metrics,
        )
        self._in_transaction = False

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        if not sql:
            raise ValidationError("SQL query is required")
        await self._engine.connect()
        return await self._engine.query(sql, params)

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        if not sql:
            raise ValidationError("SQL statement is required")
        await self._engine.connect()
        return await self._engine.execute(sql, params)

    async def transaction(
        self, fn: TransactionBody[T], isolation_level: IsolationLevel | None = None
    ) -> T:
        """Run ``fn`` in a transaction.

        ``isolation_level`` is accepted and ignored.

        Raises:
            ValidationError: If a transaction is already open on this client.
            TransactionRollbackError: If ``fn`` rolled back or raised.
        """
        if self._in_transaction:
            raise ValidationError("Nested transactions are not supported")

        await self._engine.connect()
        self._in_transaction = True
        try:
            return await self._engine.transaction(
                lambda tx: fn(ClientTransaction(self, tx)), isolation_level
            )
        finally:
            self._in_transaction = False

    def reset(self) -> None:
        """Reset all mock data."""
        self._engine.reset()
        self._in_transaction = False

    def set_table_data(self, table_name: str, rows: Iterable[Row]) -> None:
        """Pre-populate a table for testing."""
        self._engine.seed_table(table_name, rows)

    def get_table_data(self, table_name: str) -> list[Row]:
        """Get table data (for test assertions)."""
        return self._engine.get_table_data(table_name)
