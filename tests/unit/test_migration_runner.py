"""Unit tests for the migration runner."""

from __future__ import annotations

import asyncio
from datetime import timezone

import pytest

from lcplatform.domain.services import MigrationRunner
from lcplatform.domain.value_objects import ExecuteResult, Migration
from lcplatform.ports import MigrationConflictError


class RecordingExecutor:
    """Collects the statements a migration run executes."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    async def __call__(self, sql: str) -> ExecuteResult:
        self.statements.append(sql)
        return ExecuteResult(rows_affected=0)


@pytest.mark.unit
class TestMigrationRunner:
    """Tests for MigrationRunner."""

    def test_applies_in_list_order(self) -> None:
        runner = MigrationRunner()
        execute = RecordingExecutor()
        migrations = [
            Migration(version="002", up="CREATE TABLE b(id)"),
            Migration(version="001", up="CREATE TABLE a(id)"),
        ]

        report = asyncio.run(runner.run(migrations, execute))

        assert report.applied == ["002", "001"]
        assert report.skipped == []
        assert execute.statements == ["CREATE TABLE b(id)", "CREATE TABLE a(id)"]
        assert runner.applied_versions == ["002", "001"]

    def test_rerun_is_noop(self) -> None:
        runner = MigrationRunner()
        execute = RecordingExecutor()
        migrations = [Migration(version="001", up="CREATE TABLE a(id)")]

        asyncio.run(runner.run(migrations, execute))
        report = asyncio.run(runner.run(migrations, execute))

        assert report.applied == []
        assert report.skipped == ["001"]
        assert execute.statements == ["CREATE TABLE a(id)"]

    def test_duplicate_version_in_one_batch(self) -> None:
        runner = MigrationRunner()
        execute = RecordingExecutor()
        migrations = [
            Migration(version="001", up="CREATE TABLE a(id)"),
            Migration(version="001", up="CREATE TABLE a(id)"),
        ]

        report = asyncio.run(runner.run(migrations, execute))

        assert report.applied == ["001"]
        assert report.skipped == ["001"]
        assert len(execute.statements) == 1

    def test_changed_up_is_ignored_by_default(self) -> None:
        runner = MigrationRunner()
        execute = RecordingExecutor()

        asyncio.run(runner.run([Migration(version="001", up="CREATE TABLE a(id)")], execute))
        report = asyncio.run(
            runner.run([Migration(version="001", up="CREATE TABLE z(id)")], execute)
        )

        assert report.skipped == ["001"]
        assert execute.statements == ["CREATE TABLE a(id)"]

    def test_changed_up_raises_with_error_policy(self) -> None:
        runner = MigrationRunner(conflict_policy="error")
        execute = RecordingExecutor()

        asyncio.run(runner.run([Migration(version="001", up="CREATE TABLE a(id)")], execute))

        with pytest.raises(MigrationConflictError) as exc_info:
            asyncio.run(
                runner.run([Migration(version="001", up="CREATE TABLE z(id)")], execute)
            )

        assert exc_info.value.code == "MIGRATION_CONFLICT"
        assert "001" in exc_info.value.message

    def test_same_up_is_skipped_with_error_policy(self) -> None:
        runner = MigrationRunner(conflict_policy="error")
        execute = RecordingExecutor()
        migrations = [Migration(version="001", up="CREATE TABLE a(id)")]

        asyncio.run(runner.run(migrations, execute))
        report = asyncio.run(runner.run(migrations, execute))

        assert report.skipped == ["001"]

    def test_failed_migration_is_not_recorded(self) -> None:
        runner = MigrationRunner()

        async def failing(sql: str) -> ExecuteResult:
            raise RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            asyncio.run(runner.run([Migration(version="001", up="X")], failing))

        assert not runner.is_applied("001")

    def test_applied_migrations_are_stamped(self) -> None:
        runner = MigrationRunner()
        migration = Migration(version="001", up="CREATE TABLE a(id)", description="init")

        asyncio.run(runner.run([migration], RecordingExecutor()))

        (recorded,) = runner.applied()
        assert recorded.version == "001"
        assert recorded.description == "init"
        assert recorded.applied_at is not None
        assert recorded.applied_at.tzinfo == timezone.utc
        assert migration.applied_at is None
