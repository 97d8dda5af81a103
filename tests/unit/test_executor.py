"""Unit tests for the statement executor."""

from __future__ import annotations

import pytest

from lcplatform.adapters.inbound import SQLParser
from lcplatform.application import QueryExecutor, compare_rows
from lcplatform.domain.entities import TableStore
from lcplatform.domain.value_objects import ExecuteResult


@pytest.mark.unit
class TestQueryExecutor:
    """Tests for QueryExecutor."""

    @pytest.fixture
    def store(self) -> TableStore:
        return TableStore()

    @pytest.fixture
    def executor(self, store: TableStore) -> QueryExecutor:
        """Create a query executor for testing."""
        return QueryExecutor(store)

    @pytest.fixture
    def parser(self) -> SQLParser:
        return SQLParser()

    def _run(self, executor: QueryExecutor, parser: SQLParser, sql: str, params=None) -> ExecuteResult:
        return executor.execute(parser.parse(sql), params)

    def _select(self, executor: QueryExecutor, parser: SQLParser, sql: str, params=None) -> list:
        return executor.query(parser.parse_query(sql), params)

    def _users(self, executor: QueryExecutor, parser: SQLParser) -> None:
        self._run(executor, parser, "CREATE TABLE users(id, name, age)")
        for name, age in [("Alice", 30), ("Bob", 25), ("Carol", 35)]:
            self._run(
                executor, parser, "INSERT INTO users (name, age) VALUES ($1, $2)", [name, age]
            )

    def test_create_table(self, executor: QueryExecutor, parser: SQLParser, store: TableStore) -> None:
        result = self._run(executor, parser, "CREATE TABLE users(id, name)")

        assert result == ExecuteResult(rows_affected=0)
        assert store.get_rows("users") == []
        assert store.schema_for("users") == ["id", "name"]

    def test_insert_assigns_synthetic_id(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._run(executor, parser, "CREATE TABLE users(id, name)")
        first = self._run(executor, parser, "INSERT INTO users (name) VALUES ($1)", ["Alice"])
        second = self._run(executor, parser, "INSERT INTO users (name) VALUES ($1)", ["Bob"])

        assert first == ExecuteResult(rows_affected=1, insert_id=1)
        assert second == ExecuteResult(rows_affected=1, insert_id=2)
        assert store.get_rows("users") == [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ]

    def test_insert_creates_table_lazily(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        result = self._run(executor, parser, "INSERT INTO logs (msg) VALUES ($1)", ["hi"])

        assert result.rows_affected == 1
        assert store.get_rows("logs") == [{"id": 1, "msg": "hi"}]

    def test_insert_falls_back_to_schema(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        """Without a column list, parameters bind to the declared columns in order."""
        self._run(executor, parser, "CREATE TABLE kv(k, v)")
        self._run(executor, parser, "INSERT INTO kv VALUES ($1, $2)", ["a", 1])

        assert store.get_rows("kv") == [{"id": 1, "k": "a", "v": 1}]

    def test_insert_without_params_stores_only_id(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._run(executor, parser, "INSERT INTO t (a, b) VALUES ($1, $2)")

        assert store.get_rows("t") == [{"id": 1}]

    def test_insert_short_params_leave_columns_unset(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._run(executor, parser, "INSERT INTO t (a, b) VALUES ($1, $2)", ["x"])

        assert store.get_rows("t") == [{"id": 1, "a": "x"}]

    def test_select_star_in_insertion_order(self, executor: QueryExecutor, parser: SQLParser) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT * FROM users")

        assert [r["name"] for r in rows] == ["Alice", "Bob", "Carol"]

    def test_select_unknown_table(self, executor: QueryExecutor, parser: SQLParser) -> None:
        assert self._select(executor, parser, "SELECT * FROM ghosts") == []

    def test_select_with_where(self, executor: QueryExecutor, parser: SQLParser) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT name FROM users WHERE age > $1", [26])

        assert rows == [{"name": "Alice"}, {"name": "Carol"}]

    def test_where_without_params_is_not_applied(
        self, executor: QueryExecutor, parser: SQLParser
    ) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT * FROM users WHERE age > $1")

        assert len(rows) == 3

    def test_order_by_desc(self, executor: QueryExecutor, parser: SQLParser) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT name FROM users ORDER BY age DESC")

        assert rows == [{"name": "Carol"}, {"name": "Alice"}, {"name": "Bob"}]

    def test_projection_of_missing_column(self, executor: QueryExecutor, parser: SQLParser) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT name, email FROM users WHERE name = $1", ["Bob"])

        assert rows == [{"name": "Bob", "email": None}]

    def test_projection_returns_fresh_rows(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._users(executor, parser)

        rows = self._select(executor, parser, "SELECT name FROM users")
        rows[0]["name"] = "Mallory"

        assert store.get_rows("users")[0]["name"] == "Alice"

    def test_update(self, executor: QueryExecutor, parser: SQLParser, store: TableStore) -> None:
        self._users(executor, parser)

        result = self._run(
            executor, parser, "UPDATE users SET age = $1 WHERE name = $2", [31, "Alice"]
        )

        assert result.rows_affected == 1
        assert store.get_rows("users")[0]["age"] == 31

    def test_update_multiple_columns(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._users(executor, parser)

        result = self._run(
            executor,
            parser,
            "UPDATE users SET name = $1, age = $2 WHERE age < $3",
            ["Young", 0, 30],
        )

        assert result.rows_affected == 1
        assert store.get_rows("users")[1] == {"id": 2, "name": "Young", "age": 0}

    def test_update_without_where_is_noop(
        self, executor: QueryExecutor, parser: SQLParser
    ) -> None:
        self._users(executor, parser)

        result = self._run(executor, parser, "UPDATE users SET age = $1", [1])

        assert result.rows_affected == 0

    def test_update_unknown_table(self, executor: QueryExecutor, parser: SQLParser) -> None:
        result = self._run(executor, parser, "UPDATE ghosts SET a = $1 WHERE b = $2", [1, 2])

        assert result.rows_affected == 0

    def test_delete(self, executor: QueryExecutor, parser: SQLParser, store: TableStore) -> None:
        self._users(executor, parser)

        result = self._run(executor, parser, "DELETE FROM users WHERE age > $1", [26])

        assert result.rows_affected == 2
        assert [r["name"] for r in store.get_rows("users")] == ["Bob"]

    def test_delete_unknown_table(self, executor: QueryExecutor, parser: SQLParser) -> None:
        assert self._run(executor, parser, "DELETE FROM ghosts WHERE a = $1", [1]).rows_affected == 0

    def test_delete_without_params_removes_nothing(
        self, executor: QueryExecutor, parser: SQLParser, store: TableStore
    ) -> None:
        self._users(executor, parser)

        result = self._run(executor, parser, "DELETE FROM users WHERE age > $1")

        assert result.rows_affected == 0
        assert len(store.get_rows("users")) == 3

    def test_noop_statement(self, executor: QueryExecutor, parser: SQLParser) -> None:
        result = self._run(executor, parser, "ALTER TABLE users ADD COLUMN email TEXT")

        assert result == ExecuteResult(rows_affected=0)

    def test_monotonic_ids(self, store: TableStore, parser: SQLParser) -> None:
        executor = QueryExecutor(store, id_strategy="monotonic")
        for v in ("a", "b"):
            executor.execute(parser.parse("INSERT INTO t (v) VALUES ($1)"), [v])
        executor.execute(parser.parse("DELETE FROM t WHERE v = $1"), ["a"])

        result = executor.execute(parser.parse("INSERT INTO t (v) VALUES ($1)"), ["c"])

        assert result.insert_id == 3
        assert [r["id"] for r in store.get_rows("t")] == [2, 3]


@pytest.mark.unit
class TestCompareRows:
    """Tests for the ORDER BY comparator."""

    @pytest.mark.parametrize("descending", [False, True])
    def test_missing_sorts_last(self, descending: bool) -> None:
        assert compare_rows({}, {"a": 1}, "a", descending) == 1
        assert compare_rows({"a": 1}, {}, "a", descending) == -1
        assert compare_rows({}, {}, "a", descending) == 0

    @pytest.mark.parametrize("descending", [False, True])
    def test_none_sorts_after_values(self, descending: bool) -> None:
        assert compare_rows({"a": None}, {"a": 1}, "a", descending) == 1
        assert compare_rows({"a": 1}, {"a": None}, "a", descending) == -1
        assert compare_rows({"a": None}, {"a": None}, "a", descending) == 0

    def test_missing_sorts_after_none(self) -> None:
        assert compare_rows({}, {"a": None}, "a") == 1

    def test_direction(self) -> None:
        assert compare_rows({"a": 1}, {"a": 2}, "a") == -1
        assert compare_rows({"a": 1}, {"a": 2}, "a", descending=True) == 1

    def test_incomparable_values_are_equal(self) -> None:
        assert compare_rows({"a": "x"}, {"a": 1}, "a") == 0
