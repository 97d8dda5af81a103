"""Application layer for the DataStore engine.

The application layer wires the parser, executor and domain services
into the services callers use.

Exports:
    - MockDataStoreService: In-memory DataStoreService backend
    - MockConnection: Connection handle returned by get_connection()
    - MockDataClient: In-memory DataClient backend
    - QueryExecutor: Executes parsed plans against a table store
    - create_datastore: Build a configured backend
"""

from lcplatform.application.bootstrap import create_datastore
from lcplatform.application.executor import (
    FilterOperator,
    Operator,
    ProjectOperator,
    QueryExecutor,
    SeqScanOperator,
    SortOperator,
    compare_rows,
)
from lcplatform.application.mock_data_client import MockDataClient
from lcplatform.application.mock_datastore_service import MockConnection, MockDataStoreService

__all__ = [
    "MockDataStoreService",
    "MockConnection",
    "MockDataClient",
    "create_datastore",
    "QueryExecutor",
    "Operator",
    "SeqScanOperator",
    "FilterOperator",
    "SortOperator",
    "ProjectOperator",
    "compare_rows",
]
