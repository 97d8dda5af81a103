"""Statement executor using the Volcano iterator model.

SELECT plans are run as a pull-based operator pipeline:

    SeqScan -> Filter -> Sort -> Project

Write plans (CREATE TABLE, INSERT, UPDATE, DELETE) are applied directly
to the table store. Nothing here raises for an unknown table or an
unmatched clause; those degrade to empty or zero results.

References:
    - Graefe, "Volcano" (1994)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Iterator, Sequence

from lcplatform.adapters.inbound.sql_parser import (
    CreateTablePlan,
    DeletePlan,
    InsertPlan,
    NoOpPlan,
    OrderBy,
    SelectPlan,
    StatementPlan,
    UpdatePlan,
)
from lcplatform.domain.entities import IdStrategy, TableStore
from lcplatform.domain.services import PredicateEvaluator
from lcplatform.domain.value_objects import ExecuteResult, Row


class Operator(ABC):
    """Base class for executor operators (Volcano model)."""

    @abstractmethod
    def open(self) -> None:
        """Initialize the operator."""
        pass

    @abstractmethod
    def next(self) -> Row | None:
        """Return the next row or None if exhausted."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Clean up resources."""
        pass

    def __iter__(self) -> Iterator[Row]:
        """Allow iteration over operator results."""
        self.open()
        try:
            while True:
                row = self.next()
                if row is None:
                    break
                yield row
        finally:
            self.close()


class SeqScanOperator(Operator):
    """Sequential scan over a table's rows in insertion order.

    A missing table scans as empty.
    """

    def __init__(self, table_name: str, store: TableStore) -> None:
        self._table_name = table_name
        self._store = store
        self._current_row = 0
        self._rows: list[Row] = []

    def open(self) -> None:
        self._rows = list(self._store.get_rows(self._table_name) or [])
        self._current_row = 0

    def next(self) -> Row | None:
        if self._current_row >= len(self._rows):
            return None
        row = self._rows[self._current_row]
        self._current_row += 1
        return row

    def close(self) -> None:
        self._rows = []
        self._current_row = 0


class FilterOperator(Operator):
    """Filter operator that applies a WHERE clause."""

    def __init__(
        self,
        child: Operator,
        where_clause: str,
        params: Sequence[Any],
        evaluator: PredicateEvaluator,
    ) -> None:
        self._child = child
        self._where_clause = where_clause
        self._params = params
        self._evaluator = evaluator

    def open(self) -> None:
        self._child.open()

    def next(self) -> Row | None:
        while True:
            row = self._child.next()
            if row is None:
                return None
            if self._evaluator.evaluate(row, self._where_clause, self._params):
                return row

    def close(self) -> None:
        self._child.close()


def compare_rows(a: Row, b: Row, column: str, descending: bool = False) -> int:
    """Order two rows on one column.

    Rows without the column sort after all others, then None values,
    in either direction. Other values compare with < and >; values that
    cannot be compared are treated as equal.
    """
    a_has, b_has = column in a, column in b
    if not a_has or not b_has:
        return (not a_has) - (not b_has)

    a_val, b_val = a[column], b[column]
    if a_val is None or b_val is None:
        return (a_val is None) - (b_val is None)

    direction = -1 if descending else 1
    try:
        if a_val < b_val:
            return -1 * direction
        if a_val > b_val:
            return 1 * direction
    except TypeError:
        pass
    return 0


class SortOperator(Operator):
    """Stable single-column sort."""

    def __init__(self, child: Operator, order_by: OrderBy) -> None:
        self._child = child
        self._order_by = order_by
        self._sorted_rows: list[Row] = []
        self._current_idx = 0

    def open(self) -> None:
        self._child.open()
        rows = []
        while True:
            row = self._child.next()
            if row is None:
                break
            rows.append(row)

        column, descending = self._order_by.column, self._order_by.descending
        self._sorted_rows = sorted(
            rows, key=cmp_to_key(lambda a, b: compare_rows(a, b, column, descending))
        )
        self._current_idx = 0

    def next(self) -> Row | None:
        if self._current_idx >= len(self._sorted_rows):
            return None
        row = self._sorted_rows[self._current_idx]
        self._current_idx += 1
        return row

    def close(self) -> None:
        self._child.close()
        self._sorted_rows = []
        self._current_idx = 0


class ProjectOperator(Operator):
    """Project operator that builds a fresh row with only the requested columns.

    Requested columns missing from a row come out as None.
    """

    def __init__(self, child: Operator, columns: list[str]) -> None:
        self._child = child
        self._columns = columns

    def open(self) -> None:
        self._child.open()

    def next(self) -> Row | None:
        row = self._child.next()
        if row is None:
            return None
        return {col: row.get(col) for col in self._columns}

    def close(self) -> None:
        self._child.close()


class QueryExecutor:
    """Executes statement plans against a table store."""

    def __init__(
        self,
        store: TableStore,
        evaluator: PredicateEvaluator | None = None,
        id_strategy: IdStrategy = "row_count",
    ) -> None:
        self._store = store
        self._evaluator = evaluator or PredicateEvaluator()
        self._id_strategy = id_strategy

    def query(self, plan: SelectPlan, params: Sequence[Any] | None = None) -> list[Row]:
        """Run a SELECT plan.

        The WHERE clause is only applied when parameters were supplied.
        Without a projection the live row objects are returned.
        """
        return list(self._build_operator_tree(plan, params))

    def _build_operator_tree(
        self, plan: SelectPlan, params: Sequence[Any] | None
    ) -> Operator:
        operator: Operator = SeqScanOperator(plan.table_name, self._store)
        if plan.where and params is not None:
            operator = FilterOperator(operator, plan.where, params, self._evaluator)
        if plan.order_by:
            operator = SortOperator(operator, plan.order_by)
        if plan.columns:
            operator = ProjectOperator(operator, plan.columns)
        return operator

    def execute(
        self, plan: StatementPlan, params: Sequence[Any] | None = None
    ) -> ExecuteResult:
        """Run a write plan.

        Args:
            plan: The plan to apply.
            params: Positional parameters.

        Returns:
            ExecuteResult with the affected row count.
        """
        if isinstance(plan, CreateTablePlan):
            return self._execute_create_table(plan)
        elif isinstance(plan, InsertPlan):
            return self._execute_insert(plan, params)
        elif isinstance(plan, UpdatePlan):
            return self._execute_update(plan, params)
        elif isinstance(plan, DeletePlan):
            return self._execute_delete(plan, params)
        elif isinstance(plan, (NoOpPlan, SelectPlan)):
            return ExecuteResult(rows_affected=0)
        raise ValueError(f"Unsupported plan type: {type(plan).__name__}")

    def _execute_create_table(self, plan: CreateTablePlan) -> ExecuteResult:
        self._store.create_table(plan.table_name, plan.columns)
        return ExecuteResult(rows_affected=0)

    def _execute_insert(
        self, plan: InsertPlan, params: Sequence[Any] | None
    ) -> ExecuteResult:
        """Append one row with a synthetic id and positionally bound columns."""
        columns = plan.columns
        if columns is None:
            columns = self._store.schema_for(plan.table_name)

        row_id = self._store.next_row_id(plan.table_name, self._id_strategy)
        row: Row = {"id": row_id}
        if params is not None:
            # Columns without a matching parameter are left unset
            for col, value in zip(columns, params):
                row[col] = value

        rows = self._store.ensure_table(plan.table_name)
        rows.append(row)
        return ExecuteResult(rows_affected=1, insert_id=row_id)

    def _execute_update(
        self, plan: UpdatePlan, params: Sequence[Any] | None
    ) -> ExecuteResult:
        """Assign SET columns on rows matching the WHERE clause.

        Requires a SET clause, a WHERE clause and a parameter list;
        otherwise nothing is updated.
        """
        rows = self._store.get_rows(plan.table_name)
        if rows is None or params is None or not plan.where or not plan.has_set_clause:
            return ExecuteResult(rows_affected=0)

        set_params = params[: plan.set_param_count]
        where_params = params[plan.set_param_count :]

        count = 0
        for row in rows:
            if not self._evaluator.evaluate(row, plan.where, where_params):
                continue
            for col, value in zip(plan.assignments, set_params):
                row[col] = value
            count += 1

        return ExecuteResult(rows_affected=count)

    def _execute_delete(
        self, plan: DeletePlan, params: Sequence[Any] | None
    ) -> ExecuteResult:
        """Remove rows matching the WHERE clause.

        A DELETE without a WHERE clause or without parameters removes
        nothing.
        """
        rows = self._store.get_rows(plan.table_name)
        if rows is None or params is None or not plan.where:
            return ExecuteResult(rows_affected=0)

        rows_to_keep = []
        count = 0
        for row in rows:
            if self._evaluator.evaluate(row, plan.where, params):
                count += 1
            else:
                rows_to_keep.append(row)

        self._store.replace_rows(plan.table_name, rows_to_keep)
        return ExecuteResult(rows_affected=count)
