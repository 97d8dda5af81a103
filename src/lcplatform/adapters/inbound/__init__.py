"""Inbound adapters for the DataStore engine.

Inbound adapters turn incoming statement text into internal plans.

Exports:
    SQL Parser:
        - SQLParser: Regex-based parser for the supported SQL subset
        - StatementPlan: Base class for all plans
        - classify / resolve_table_name: Statement routing helpers
"""

from lcplatform.adapters.inbound.sql_parser import (
    DEFAULT_TABLE,
    CreateTablePlan,
    DeletePlan,
    InsertPlan,
    NoOpPlan,
    OrderBy,
    SelectPlan,
    SQLParser,
    StatementPlan,
    UpdatePlan,
    classify,
    resolve_table_name,
)

__all__ = [
    "DEFAULT_TABLE",
    "SQLParser",
    "classify",
    "resolve_table_name",
    "StatementPlan",
    "SelectPlan",
    "CreateTablePlan",
    "InsertPlan",
    "UpdatePlan",
    "DeletePlan",
    "NoOpPlan",
    "OrderBy",
]
