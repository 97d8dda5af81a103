"""Unit tests for the in-memory table store."""

from __future__ import annotations

import pytest

from lcplatform.domain.entities import TableStore


@pytest.mark.unit
class TestTableStore:
    """Tests for TableStore."""

    def test_ensure_table_creates_lazily(self) -> None:
        store = TableStore()

        assert store.get_rows("users") is None
        rows = store.ensure_table("users")
        assert rows == []
        assert store.get_rows("users") is rows

    def test_create_table_resets_rows(self) -> None:
        store = TableStore()
        store.ensure_table("t").append({"id": 1})

        store.create_table("t", ["x"])

        assert store.get_rows("t") == []
        assert store.schema_for("t") == ["x"]

    def test_create_table_without_columns_keeps_schema(self) -> None:
        store = TableStore()
        store.create_table("t", ["a", "b"])
        store.create_table("t", None)

        assert store.schema_for("t") == ["a", "b"]

    def test_schema_for_unknown_table(self) -> None:
        assert TableStore().schema_for("nope") == []

    def test_row_count_ids_repeat_after_delete(self) -> None:
        store = TableStore()
        rows = store.ensure_table("t")
        rows.extend([{"id": 1}, {"id": 2}])
        store.replace_rows("t", [{"id": 1}])

        assert store.next_row_id("t") == 2

    def test_monotonic_ids_never_repeat(self) -> None:
        store = TableStore()
        rows = store.ensure_table("t")
        for _ in range(2):
            rows.append({"id": store.next_row_id("t", "monotonic")})
        store.replace_rows("t", [rows[0]])

        assert store.next_row_id("t", "monotonic") == 3

    def test_monotonic_ids_continue_after_seed(self) -> None:
        store = TableStore()
        store.seed("t", [{"id": 1}, {"id": 2}, {"id": 3}])

        assert store.next_row_id("t", "monotonic") == 4


@pytest.mark.unit
class TestSnapshots:
    """Tests for snapshot and restore."""

    def test_shallow_snapshot_restores_membership(self) -> None:
        store = TableStore()
        store.ensure_table("t").append({"id": 1})
        snapshot = store.snapshot()

        store.ensure_table("t").append({"id": 2})
        store.ensure_table("other")
        store.restore(snapshot)

        assert store.get_rows("t") == [{"id": 1}]
        assert store.get_rows("other") is None

    def test_shallow_snapshot_shares_row_objects(self) -> None:
        """In-place edits to existing rows survive a shallow restore."""
        store = TableStore()
        store.ensure_table("t").append({"id": 1, "v": "old"})
        snapshot = store.snapshot("shallow")

        store.get_rows("t")[0]["v"] = "new"
        store.restore(snapshot)

        assert store.get_rows("t")[0]["v"] == "new"

    def test_deep_snapshot_restores_row_contents(self) -> None:
        store = TableStore()
        store.ensure_table("t").append({"id": 1, "v": "old"})
        snapshot = store.snapshot("deep")

        store.get_rows("t")[0]["v"] = "new"
        store.restore(snapshot)

        assert store.get_rows("t")[0]["v"] == "old"

    def test_restore_twice(self) -> None:
        store = TableStore()
        snapshot = store.snapshot()
        store.ensure_table("t").append({"id": 1})

        store.restore(snapshot)
        store.ensure_table("t").append({"id": 1})
        store.restore(snapshot)

        assert store.table_names() == []

    def test_deep_restore_twice_after_in_place_edits(self) -> None:
        store = TableStore()
        store.ensure_table("t").append({"id": 1, "v": "old"})
        snapshot = store.snapshot("deep")

        store.restore(snapshot)
        store.get_rows("t")[0]["v"] = "new"
        store.restore(snapshot)

        assert store.get_rows("t")[0]["v"] == "old"

    def test_seed_copies_rows(self) -> None:
        store = TableStore()
        source = [{"id": 1}]
        store.seed("t", source)
        source[0]["id"] = 99

        assert store.get_rows("t") == [{"id": 1}]

    def test_clear(self) -> None:
        store = TableStore()
        store.create_table("t", ["a"])
        store.clear()

        assert store.table_names() == []
        assert store.schema_for("t") == []
