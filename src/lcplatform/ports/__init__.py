"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Inbound ports: APIs offered to clients (DataStoreService, DataClient)

Adapters and application services implement these ports.
"""

from lcplatform.ports.inbound import (
    Connection,
    DataClient,
    DataStoreService,
    LCPlatformError,
    MigrationConflictError,
    NotConnectedError,
    Transaction,
    TransactionRollbackError,
    ValidationError,
)

__all__ = [
    "Connection",
    "DataClient",
    "DataStoreService",
    "Transaction",
    "LCPlatformError",
    "ValidationError",
    "NotConnectedError",
    "TransactionRollbackError",
    "MigrationConflictError",
]
