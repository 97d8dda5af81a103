"""Snapshot-based transaction management.

Transactions in the in-memory engine are not isolated. A snapshot of
the table mapping is taken at begin, the body runs directly against the
live store, and on failure the snapshot is put back.

State machine:

    IDLE ──begin()──> ACTIVE ──┬── body returns / commit() ──> COMMITTED
                               └── rollback() / raises ─────> ROLLED_BACK

COMMITTED and ROLLED_BACK are terminal: a terminal transaction never
touches the store again through ``restore`` or ``rollback``.

Limitations:
    - With the default shallow snapshot, rows changed in place by an
      UPDATE inside the transaction keep their new values after a
      rollback. Inserted and deleted rows are restored.
    - There is no locking. A body that awaits other work can interleave
      with other callers of the same store.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, TypeVar

from lcplatform.domain.entities import SnapshotMode, TableSnapshot, TableStore
from lcplatform.domain.value_objects import ExecuteResult, Row, TransactionState
from lcplatform.ports.inbound.datastore_service import TransactionRollbackError

T = TypeVar("T")


class StatementRunner(Protocol):
    """Read and write entry points a transaction delegates to."""

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        ...

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        ...


class MockTransaction:
    """Transaction handle bound to a live store.

    A managed handle belongs to ``SnapshotTransactionManager.run``: its
    ``commit`` does nothing, since the outcome is decided when the body
    finishes. An unmanaged handle, from ``begin``, commits on ``commit``.
    """

    def __init__(
        self,
        runner: StatementRunner,
        store: TableStore,
        snapshot_mode: SnapshotMode = "shallow",
        managed: bool = False,
    ) -> None:
        self._runner = runner
        self._store = store
        self._snapshot_mode = snapshot_mode
        self._managed = managed
        self._snapshot: TableSnapshot | None = None
        self.state = TransactionState.IDLE

    def begin(self) -> None:
        """Capture the snapshot and activate the transaction."""
        if self.state != TransactionState.IDLE:
            raise RuntimeError(f"Cannot begin transaction in state {self.state.name}")
        self._snapshot = self._store.snapshot(self._snapshot_mode)
        self.state = TransactionState.ACTIVE

    async def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        return await self._runner.query(sql, params)

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> ExecuteResult:
        return await self._runner.execute(sql, params)

    async def commit(self) -> None:
        """Mark the transaction committed. Statements were applied as they ran."""
        if self._managed or self.state != TransactionState.ACTIVE:
            return
        self.state = TransactionState.COMMITTED

    async def rollback(self) -> None:
        """Restore the snapshot and abort the transaction body.

        Raises:
            RuntimeError: If the transaction already committed.
            TransactionRollbackError: Otherwise, always.
        """
        if self.state == TransactionState.COMMITTED:
            raise RuntimeError("Cannot roll back a committed transaction")
        self.restore()
        raise TransactionRollbackError()

    def restore(self) -> None:
        """Put the snapshot back and mark the transaction rolled back.

        Does nothing once the transaction is terminal.
        """
        if self.state.is_terminal() or self._snapshot is None:
            return
        self._store.restore(self._snapshot)
        self.state = TransactionState.ROLLED_BACK

    def discard_late_writes(self) -> None:
        """Put the snapshot back again after a rollback.

        Undoes statements that ran after ``rollback()`` when the body
        caught the rollback error and carried on.
        """
        if self.state == TransactionState.ROLLED_BACK and self._snapshot is not None:
            self._store.restore(self._snapshot)


class SnapshotTransactionManager:
    """Runs transaction bodies with snapshot/restore semantics."""

    def __init__(self, store: TableStore, snapshot_mode: SnapshotMode = "shallow") -> None:
        """Initialize the manager.

        Args:
            store: The live store transactions run against.
            snapshot_mode: 'shallow' shares row objects with the store,
                'deep' copies them so in-place updates are undone too.
        """
        self._store = store
        self._snapshot_mode = snapshot_mode

    @property
    def snapshot_mode(self) -> SnapshotMode:
        return self._snapshot_mode

    def begin(self, runner: StatementRunner) -> MockTransaction:
        """Start a transaction whose statements go through ``runner``."""
        tx = MockTransaction(runner, self._store, self._snapshot_mode)
        tx.begin()
        return tx

    async def run(
        self,
        runner: StatementRunner,
        fn: Callable[[MockTransaction], Awaitable[T]],
    ) -> T:
        """Run ``fn`` in a transaction.

        Args:
            runner: Entry points the transaction handle delegates to.
            fn: Coroutine function receiving the transaction handle.

        Returns:
            The value returned by ``fn``.

        Raises:
            TransactionRollbackError: If ``fn`` rolled back or raised. Any
                other exception from ``fn`` is chained as the cause.
                Cancellation propagates unchanged, after the restore.
        """
        tx = MockTransaction(runner, self._store, self._snapshot_mode, managed=True)
        tx.begin()
        try:
            result = await fn(tx)
        except TransactionRollbackError:
            self._abort(tx)
            raise
        except Exception as e:
            self._abort(tx)
            raise TransactionRollbackError(str(e) or type(e).__name__) from e
        except BaseException:
            self._abort(tx)
            raise

        if tx.state == TransactionState.ROLLED_BACK:
            # The body caught its own rollback and returned
            self._abort(tx)
            raise TransactionRollbackError()

        tx.state = TransactionState.COMMITTED
        return result

    @staticmethod
    def _abort(tx: MockTransaction) -> None:
        if tx.state == TransactionState.ROLLED_BACK:
            tx.discard_late_writes()
        else:
            tx.restore()
