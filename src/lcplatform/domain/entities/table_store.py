"""In-memory row/table store.

The physical state of the mock engine: table name to an ordered list of
rows, plus table name to the column names declared by CREATE TABLE.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal

from lcplatform.domain.value_objects import Row

SnapshotMode = Literal["shallow", "deep"]
IdStrategy = Literal["row_count", "monotonic"]


@dataclass(frozen=True)
class TableSnapshot:
    """Point-in-time copy of the table mapping.

    In shallow mode each row list is a new list but the row dicts are
    the live store's objects, so in-place UPDATEs are not undone by a
    restore. Deep mode copies every row dict as well.
    """

    tables: dict[str, list[Row]]
    mode: SnapshotMode = "shallow"


@dataclass
class TableStore:
    """Tables, their declared columns, and per-table id sequences.

    Rows are stored as plain dicts in insertion order. Nothing here
    enforces a schema.
    """

    tables: dict[str, list[Row]] = field(default_factory=dict)
    schemas: dict[str, list[str]] = field(default_factory=dict)
    _sequences: dict[str, int] = field(default_factory=dict, repr=False)

    def get_rows(self, name: str) -> list[Row] | None:
        """Get the live row list of a table, or None if it does not exist."""
        return self.tables.get(name)

    def ensure_table(self, name: str) -> list[Row]:
        """Get a table's row list, creating an empty table if needed."""
        rows = self.tables.get(name)
        if rows is None:
            rows = []
            self.tables[name] = rows
        return rows

    def create_table(self, name: str, columns: list[str] | None) -> None:
        """Register an empty table, replacing any existing rows.

        The schema entry is only replaced when a column list is given.
        """
        self.tables[name] = []
        if columns is not None:
            self.schemas[name] = list(columns)

    def schema_for(self, name: str) -> list[str]:
        """Get the declared columns of a table, or an empty list."""
        return list(self.schemas.get(name, []))

    def replace_rows(self, name: str, rows: list[Row]) -> None:
        """Swap a table's row list for a new one."""
        self.tables[name] = rows

    def next_row_id(self, name: str, strategy: IdStrategy = "row_count") -> int:
        """Compute the synthetic id for the next row inserted into ``name``.

        ``row_count`` yields current row count + 1, which can repeat an
        id after a delete. ``monotonic`` never repeats within a table.
        """
        count = len(self.tables.get(name, []))
        if strategy == "row_count":
            return count + 1
        next_id = max(self._sequences.get(name, 0), count) + 1
        self._sequences[name] = next_id
        return next_id

    def snapshot(self, mode: SnapshotMode = "shallow") -> TableSnapshot:
        """Capture the current table mapping."""
        if mode == "deep":
            tables = {
                name: [dict(row) for row in rows] for name, rows in self.tables.items()
            }
        else:
            tables = {name: list(rows) for name, rows in self.tables.items()}
        return TableSnapshot(tables=tables, mode=mode)

    def restore(self, snapshot: TableSnapshot) -> None:
        """Replace the live table mapping with a snapshot.

        A deep snapshot hands out fresh row copies, so it can be restored
        more than once. Schemas and id sequences are left as they are.
        """
        if snapshot.mode == "deep":
            self.tables = {
                name: [dict(row) for row in rows] for name, rows in snapshot.tables.items()
            }
        else:
            self.tables = {name: list(rows) for name, rows in snapshot.tables.items()}

    def seed(self, name: str, rows: Iterable[Row]) -> None:
        """Replace a table's contents with copies of ``rows``."""
        self.tables[name] = [dict(row) for row in rows]

    def clear(self) -> None:
        """Drop all tables, schemas and sequences."""
        self.tables.clear()
        self.schemas.clear()
        self._sequences.clear()

    def table_names(self) -> list[str]:
        """List table names in creation order."""
        return list(self.tables)
