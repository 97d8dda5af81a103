"""Domain entities - stateful objects owned by one engine instance."""

from lcplatform.domain.entities.table_store import (
    IdStrategy,
    SnapshotMode,
    TableSnapshot,
    TableStore,
)

__all__ = [
    "TableStore",
    "TableSnapshot",
    "SnapshotMode",
    "IdStrategy",
]
