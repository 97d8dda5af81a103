"""Mock DataStoreService - in-memory relational backend.

This module provides the DataStore backend used for local development
and tests. It interprets a narrow SQL subset over in-memory tables and
keeps no state beyond the lifetime of the instance.

Usage:
    from lcplatform.application import MockDataStoreService

    store = MockDataStoreService()
    await store.connect()

    await store.execute("CREATE TABLE users(id, name, age)")
    await store.execute("INSERT INTO users (name, age) VALUES ($1, $2)", ["Alice", 30])
    rows = await store.query("SELECT name FROM users WHERE age > $1", [18])

Concurrency:
    Every operation is a coroutine but none of them suspends, so a
    single query or execute runs atomically. Transactions that await
    other work can interleave with other callers; there is no locking.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Generator, Iterable, Optional, Sequence, TypeVar

from lcplatform.adapters.inbound.sql_parser import SQLParser
from lcplatform.application.executor import QueryExecutor
from lcplatform.domain.entities import TableStore
from lcplatform.domain.services import (
    MigrationRunner,
    MockTransaction,
    PredicateEvaluator,
    SnapshotTransactionManager,
)
from lcplatform.domain.value_objects import (
    ExecuteResult,
    IsolationLevel,
    Migration,
    Row,
    StatementKind,
)
from lcplatform.infrastructure.config import DataStoreConfig, get_config
from lcplatform.infrastructure.logging import get_logger
from lcplatform.infrastructure.metrics import MetricsRegistry, get_metrics
from lcplatform.infrastructure.tracing import trace_span
from lcplatform.ports.inbound.datastore_service import (
    NotConnectedError,
    TransactionBody,
    TransactionRollbackError,
)

T = TypeVar("T")


class MockConnection:
    """Connection handle over the owning service's store. ``close`` does nothing."""

    def __init__(self, service: MockDataStoreService) -> None:
        self._service = service

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        return await self._service.query(sql, params)

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        return await self._service.execute(sql, params)

    async def close(self) -> None:
        pass


class MockDataStoreService:
    """In-memory implementation of the DataStoreService port.

    Soft behaviours, kept so test code written against the mock stays
    permissive:
        - Unrecognised write statements affect zero rows.
        - Statements without a resolvable table use the default table.
        - WHERE segments that are not ``column op $N`` always match.
        - Unknown tables read as empty and write as zero rows affected.
    """

    def __init__(
        self,
        config: DataStoreConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Engine behaviour. Defaults to the global config.
            metrics: Metrics registry. Defaults to the global registry.
        """
        self._config = config or get_config().datastore
        self._metrics = metrics or get_metrics()
        self._logger = get_logger(__name__, backend="mock")

        self._store = TableStore()
        self._parser = SQLParser(default_table=self._config.default_table)
        self._executor = QueryExecutor(
            self._store,
            evaluator=PredicateEvaluator(),
            id_strategy=self._config.id_strategy,
        )
        self._transactions = SnapshotTransactionManager(
            self._store, snapshot_mode=self._config.snapshot_mode
        )
        self._migrations = MigrationRunner(conflict_policy=self._config.migration_conflict)
        self._connected = False

    @property
    def config(self) -> DataStoreConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def applied_migrations(self) -> list[str]:
        """Versions applied so far, in application order."""
        return self._migrations.applied_versions

    async def connect(self, connection_string: str | None = None) -> None:
        """Mark the engine ready. The connection string is ignored."""
        if not self._connected:
            self._connected = True
            self._logger.info("datastore_connected")

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        """Run statement text through the read path."""
        self._ensure_connected()

        plan = self._parser.parse_query(sql)
        with trace_span(
            "datastore.query", {"db.operation": "select", "db.sql.table": plan.table_name}
        ):
            with self._observe(StatementKind.SELECT):
                rows = self._executor.query(plan, params)

        self._logger.debug("query_executed", sql=sql, table=plan.table_name, rows=len(rows))
        return rows

    async def execute(
        self, sql: str, params: Optional[Sequence[Any]] = None
    ) -> ExecuteResult:
        """Run statement text through the write path."""
        self._ensure_connected()

        plan = self._parser.parse(sql)
        with trace_span(
            "datastore.execute",
            {"db.operation": plan.kind.value, "db.sql.table": plan.table_name},
        ):
            with self._observe(plan.kind):
                result = self._executor.execute(plan, params)

        if plan.kind == StatementKind.CREATE_TABLE:
            self._metrics.tables.set(len(self._store.tables))
        self._logger.debug(
            "statement_executed",
            sql=sql,
            kind=plan.kind.value,
            table=plan.table_name,
            rows_affected=result.rows_affected,
        )
        return result

    async def transaction(
        self, fn: TransactionBody[T], isolation_level: IsolationLevel | None = None
    ) -> T:
        """Run ``fn`` against the live store, restoring a snapshot on failure.

        ``isolation_level`` is accepted for interface compatibility and
        ignored: every transaction runs against the live store.

        Raises:
            TransactionRollbackError: If ``fn`` called ``rollback()`` or
                raised. The store has been restored when this propagates.
        """
        self._ensure_connected()

        self._metrics.transactions_active.inc()
        try:
            with trace_span(
                "datastore.transaction",
                {
                    "db.snapshot_mode": self._config.snapshot_mode,
                    "db.isolation_level": isolation_level.value if isolation_level else None,
                },
            ):
                result = await self._transactions.run(self, fn)
        except TransactionRollbackError as e:
            self._metrics.transactions_total.labels(status="rollback").inc()
            self._logger.warning("transaction_rolled_back", reason=e.details.get("reason"))
            raise
        except BaseException:
            self._metrics.transactions_total.labels(status="rollback").inc()
            self._logger.warning("transaction_cancelled")
            raise
        finally:
            self._metrics.transactions_active.dec()

        self._metrics.transactions_total.labels(status="commit").inc()
        return result

    async def migrate(self, migrations: Sequence[Migration]) -> None:
        """Apply each migration whose version has not been applied yet."""
        self._ensure_connected()

        with trace_span("datastore.migrate", {"db.migrations": len(migrations)}):
            report = await self._migrations.run(migrations, self.execute)

        for version in report.applied:
            self._metrics.migrations_applied_total.inc()
            self._logger.info("migration_applied", version=version)
        for version in report.skipped:
            self._metrics.migrations_skipped_total.inc()
            self._logger.info("migration_skipped", version=version)

    def get_connection(self) -> MockConnection:
        """Get a connection bound to this service."""
        self._ensure_connected()
        return MockConnection(self)

    def begin(self) -> MockTransaction:
        """Start a transaction for callers that drive it by hand.

        ``rollback()`` restores the snapshot taken here. Nothing is
        restored automatically.
        """
        self._ensure_connected()
        return self._transactions.begin(self)

    # Test support

    def reset(self) -> None:
        """Drop all tables and forget applied migrations."""
        self._store.clear()
        self._migrations = MigrationRunner(conflict_policy=self._config.migration_conflict)
        self._metrics.tables.set(0)

    def seed_table(self, name: str, rows: Iterable[Row]) -> None:
        """Replace a table's contents with copies of ``rows``."""
        self._store.seed(name, rows)
        self._metrics.tables.set(len(self._store.tables))

    def get_table_data(self, name: str) -> list[Row]:
        """Copies of a table's rows, or an empty list for an unknown table."""
        return [dict(row) for row in self._store.get_rows(name) or []]

    def table_names(self) -> list[str]:
        return self._store.table_names()

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise NotConnectedError()

    @contextmanager
    def _observe(self, kind: StatementKind) -> Generator[None, None, None]:
        """Record statement count and latency."""
        start = time.perf_counter()
        status = "error"
        try:
            yield
            status = "success"
        finally:
            self._metrics.statements_total.labels(kind=kind.value, status=status).inc()
            self._metrics.statement_latency_seconds.labels(kind=kind.value).observe(
                time.perf_counter() - start
            )
