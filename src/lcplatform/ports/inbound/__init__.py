"""Inbound ports - API contracts offered to callers."""

from lcplatform.ports.inbound.datastore_service import (
    Connection,
    DataClient,
    DataStoreService,
    LCPlatformError,
    MigrationConflictError,
    NotConnectedError,
    Params,
    Transaction,
    TransactionBody,
    TransactionRollbackError,
    ValidationError,
)

__all__ = [
    "Connection",
    "DataClient",
    "DataStoreService",
    "Params",
    "Transaction",
    "TransactionBody",
    "LCPlatformError",
    "ValidationError",
    "NotConnectedError",
    "TransactionRollbackError",
    "MigrationConflictError",
]
