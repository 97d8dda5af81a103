"""Migration runner with an append-only ledger of applied versions."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Literal, Sequence

from lcplatform.domain.value_objects import ExecuteResult, Migration
from lcplatform.ports.inbound.datastore_service import MigrationConflictError

ConflictPolicy = Literal["ignore", "error"]


@dataclass
class MigrationReport:
    """Outcome of one ``run`` call."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class MigrationRunner:
    """Applies migrations at most once per version.

    A version is recorded after its ``up`` statement runs and is never
    run again, whatever ``up`` text it is later supplied with. With the
    'error' conflict policy a changed ``up`` raises instead of being
    skipped silently.
    """

    def __init__(self, conflict_policy: ConflictPolicy = "ignore") -> None:
        self._conflict_policy = conflict_policy
        self._ledger: dict[str, Migration] = {}

    @property
    def applied_versions(self) -> list[str]:
        """Applied versions in application order."""
        return list(self._ledger)

    def applied(self) -> list[Migration]:
        """Applied migrations, stamped with ``applied_at``."""
        return list(self._ledger.values())

    def is_applied(self, version: str) -> bool:
        return version in self._ledger

    async def run(
        self,
        migrations: Sequence[Migration],
        execute: Callable[[str], Awaitable[ExecuteResult]],
    ) -> MigrationReport:
        """Apply unapplied migrations in list order.

        Args:
            migrations: Migrations to consider.
            execute: Write path used to run each ``up`` statement.

        Returns:
            Which versions were applied and which were skipped.

        Raises:
            MigrationConflictError: If the policy is 'error' and an
                applied version comes back with different ``up`` text.
        """
        report = MigrationReport()
        for migration in migrations:
            recorded = self._ledger.get(migration.version)
            if recorded is not None:
                if self._conflict_policy == "error" and recorded.up != migration.up:
                    raise MigrationConflictError(migration.version)
                report.skipped.append(migration.version)
                continue

            await execute(migration.up)
            self._ledger[migration.version] = dataclasses.replace(
                migration, applied_at=datetime.now(timezone.utc)
            )
            report.applied.append(migration.version)
        return report
