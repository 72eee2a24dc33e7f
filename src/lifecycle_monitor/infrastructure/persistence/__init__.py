"""
Persistence adapters for the event log.
"""

from lifecycle_monitor.infrastructure.persistence.filesystem import (
    FilesystemSnapshotStore,
)
from lifecycle_monitor.infrastructure.persistence.memory import InMemorySnapshotStore

__all__ = [
    "InMemorySnapshotStore",
    "FilesystemSnapshotStore",
]
