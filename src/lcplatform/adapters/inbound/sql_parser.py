"""SQL statement parser for the in-memory engine.

This module turns statement text into small plan objects for the
executor. It recognises exactly the statement shapes the mock engine
supports and degrades instead of rejecting anything else:

    - Unrecognised write statements become a ``NoOpPlan``.
    - A statement with no resolvable table targets the default table.
    - Clauses that cannot be found are simply absent from the plan.

Supported statements:
    - SELECT <cols|*> FROM t [WHERE ...] [ORDER BY col [ASC|DESC]]
    - CREATE TABLE t (col ..., col ...)
    - INSERT INTO t [(cols)] VALUES (...)
    - UPDATE t SET col = $N, ... [WHERE ...]
    - DELETE FROM t [WHERE ...]

Placeholders are ``$N``; the digits are ignored and parameters bind by
order of appearance.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from lcplatform.domain.value_objects import StatementKind

DEFAULT_TABLE = "default"

_TABLE_NAME_RE = re.compile(r"(?:from|into|update|table)\s+(\w+)", re.IGNORECASE)
_CREATE_TABLE_RE = re.compile(r"create\s+table\b", re.IGNORECASE)
_SELECT_COLUMNS_RE = re.compile(r"select\s+(.*?)\s+from", re.IGNORECASE)
_QUERY_WHERE_RE = re.compile(r"where\s+(.+?)(?:order|limit|$)", re.IGNORECASE)
_ORDER_BY_RE = re.compile(r"order\s+by\s+(\w+)(?:\s+(asc|desc))?", re.IGNORECASE)
_COLUMN_DEFS_RE = re.compile(r"\((.*)\)", re.DOTALL)
_LEADING_IDENT_RE = re.compile(r"^(\w+)")
_INSERT_COLUMNS_RE = re.compile(r"\((.*?)\)\s*values", re.IGNORECASE)
_SET_RE = re.compile(r"set\s+(.*?)(?:where|$)", re.IGNORECASE)
_WHERE_TO_END_RE = re.compile(r"where\s+(.+)$", re.IGNORECASE)


@dataclass
class OrderBy:
    """Single-column ordering."""

    column: str
    descending: bool = False

    def __str__(self) -> str:
        return f"{self.column} {'DESC' if self.descending else 'ASC'}"


@dataclass
class StatementPlan(ABC):
    """Base class for parsed statements."""

    table_name: str

    @property
    @abstractmethod
    def kind(self) -> StatementKind:
        """The kind of statement this plan executes."""
        pass


@dataclass
class SelectPlan(StatementPlan):
    """Read a table with optional filter, ordering and projection.

    ``columns`` is None for ``SELECT *`` or when no projection list
    could be found; both return full rows.
    """

    columns: list[str] | None = None
    where: str | None = None
    order_by: OrderBy | None = None

    @property
    def kind(self) -> StatementKind:
        return StatementKind.SELECT

    def __str__(self) -> str:
        cols = ", ".join(self.columns) if self.columns else "*"
        parts = [f"Select({cols}) FROM {self.table_name}"]
        if self.where:
            parts.append(f"WHERE {self.where}")
        if self.order_by:
            parts.append(f"ORDER BY {self.order_by}")
        return " ".join(parts)


@dataclass
class CreateTablePlan(StatementPlan):
    """Create (or reset) a table. ``columns`` is None without a column list."""

    columns: list[str] | None = None

    @property
    def kind(self) -> StatementKind:
        return StatementKind.CREATE_TABLE

    def __str__(self) -> str:
        return f"CreateTable({self.table_name}, {self.columns})"


@dataclass
class InsertPlan(StatementPlan):
    """Insert one row. ``columns`` is None when the table schema should be used."""

    columns: list[str] | None = None

    @property
    def kind(self) -> StatementKind:
        return StatementKind.INSERT

    def __str__(self) -> str:
        return f"Insert({self.table_name}, cols={self.columns})"


@dataclass
class UpdatePlan(StatementPlan):
    """Assign columns on matching rows.

    The first ``set_param_count`` parameters feed ``assignments`` in
    order; the rest feed the WHERE clause.
    """

    assignments: list[str] = field(default_factory=list)
    set_param_count: int = 0
    where: str | None = None
    has_set_clause: bool = False

    @property
    def kind(self) -> StatementKind:
        return StatementKind.UPDATE

    def __str__(self) -> str:
        where = f" WHERE {self.where}" if self.where else ""
        return f"Update({self.table_name}, SET {self.assignments}{where})"


@dataclass
class DeletePlan(StatementPlan):
    """Remove matching rows."""

    where: str | None = None

    @property
    def kind(self) -> StatementKind:
        return StatementKind.DELETE

    def __str__(self) -> str:
        where = f" WHERE {self.where}" if self.where else ""
        return f"Delete({self.table_name}{where})"


@dataclass
class NoOpPlan(StatementPlan):
    """Statement text the write path does not recognise."""

    sql: str = ""

    @property
    def kind(self) -> StatementKind:
        return StatementKind.NOOP

    def __str__(self) -> str:
        return "NoOp"


def resolve_table_name(sql: str, default: str = DEFAULT_TABLE) -> str:
    """Find the identifier after the first FROM, INTO, UPDATE or TABLE keyword.

    Falls back to ``default`` when no such keyword is followed by an
    identifier.
    """
    match = _TABLE_NAME_RE.search(sql)
    return match.group(1) if match else default


def classify(sql: str) -> StatementKind:
    """Route statement text by its leading keyword."""
    text = sql.strip().lower()
    if _CREATE_TABLE_RE.match(text):
        return StatementKind.CREATE_TABLE
    if text.startswith("insert"):
        return StatementKind.INSERT
    if text.startswith("update"):
        return StatementKind.UPDATE
    if text.startswith("delete"):
        return StatementKind.DELETE
    if text.startswith("select"):
        return StatementKind.SELECT
    return StatementKind.NOOP


def _split_list(text: str) -> list[str]:
    return [part.strip() for part in text.split(",")]


class SQLParser:
    """Regex-based parser for the mock engine's SQL subset.

    Example:
        >>> parser = SQLParser()
        >>> print(parser.parse_query("SELECT id, name FROM users WHERE age > $1"))
        Select(id, name) FROM users WHERE age > $1
    """

    def __init__(self, default_table: str = DEFAULT_TABLE) -> None:
        """Initialize the parser.

        Args:
            default_table: Table name used when none can be resolved.
        """
        self._default_table = default_table

    def table_name(self, sql: str) -> str:
        """Resolve the target table of a statement."""
        return resolve_table_name(sql, self._default_table)

    def parse(self, sql: str) -> StatementPlan:
        """Parse a write statement.

        SELECT and unrecognised text both produce a ``NoOpPlan``; reads
        go through ``parse_query``.

        Args:
            sql: The statement to parse.

        Returns:
            A plan for the executor.
        """
        kind = classify(sql)
        if kind == StatementKind.CREATE_TABLE:
            return self._parse_create_table(sql)
        elif kind == StatementKind.INSERT:
            return self._parse_insert(sql)
        elif kind == StatementKind.UPDATE:
            return self._parse_update(sql)
        elif kind == StatementKind.DELETE:
            return self._parse_delete(sql)
        return NoOpPlan(table_name=self.table_name(sql), sql=sql)

    def parse_query(self, sql: str) -> SelectPlan:
        """Parse statement text as a SELECT.

        The read path does not classify: any text is read as a SELECT
        and whatever clauses can be found are applied.
        """
        columns: list[str] | None = None
        select_match = _SELECT_COLUMNS_RE.search(sql)
        if select_match:
            projection = select_match.group(1).strip()
            if projection != "*":
                columns = _split_list(projection)

        where = None
        where_match = _QUERY_WHERE_RE.search(sql)
        if where_match and where_match.group(1):
            where = where_match.group(1).strip()

        order_by = None
        order_match = _ORDER_BY_RE.search(sql)
        if order_match:
            direction = order_match.group(2)
            order_by = OrderBy(
                column=order_match.group(1),
                descending=direction is not None and direction.lower() == "desc",
            )

        return SelectPlan(
            table_name=self.table_name(sql),
            columns=columns,
            where=where,
            order_by=order_by,
        )

    def _parse_create_table(self, sql: str) -> CreateTablePlan:
        """Take the leading identifier of each comma-separated column definition."""
        columns = None
        defs_match = _COLUMN_DEFS_RE.search(sql)
        if defs_match and defs_match.group(1):
            columns = []
            for definition in defs_match.group(1).split(","):
                ident = _LEADING_IDENT_RE.match(definition.strip())
                if ident:
                    columns.append(ident.group(1))
        return CreateTablePlan(table_name=self.table_name(sql), columns=columns)

    def _parse_insert(self, sql: str) -> InsertPlan:
        columns = None
        columns_match = _INSERT_COLUMNS_RE.search(sql)
        if columns_match and columns_match.group(1):
            columns = _split_list(columns_match.group(1))
        return InsertPlan(table_name=self.table_name(sql), columns=columns)

    def _parse_update(self, sql: str) -> UpdatePlan:
        plan = UpdatePlan(table_name=self.table_name(sql))

        set_match = _SET_RE.search(sql)
        if set_match and set_match.group(1):
            set_clause = set_match.group(1)
            plan.has_set_clause = True
            # Every '=' in the SET text claims one leading parameter
            plan.set_param_count = set_clause.count("=")
            plan.assignments = [
                column
                for column in (part.split("=")[0].strip() for part in _split_list(set_clause))
                if column
            ]

        where_match = _WHERE_TO_END_RE.search(sql)
        if where_match and where_match.group(1):
            plan.where = where_match.group(1).strip()
        return plan

    def _parse_delete(self, sql: str) -> DeletePlan:
        where = None
        where_match = _WHERE_TO_END_RE.search(sql)
        if where_match and where_match.group(1):
            where = where_match.group(1).strip()
        return DeletePlan(table_name=self.table_name(sql), where=where)
