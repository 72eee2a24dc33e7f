"""
In-memory implementation of the snapshot store.

Useful for testing and ephemeral sessions.
"""

from lifecycle_monitor.domain.interfaces import SnapshotStoreInterface
from lifecycle_monitor.domain.models import PersistedLog


class InMemorySnapshotStore(SnapshotStoreInterface):
    """Simple in-memory store for testing."""

    def __init__(self, snapshot: PersistedLog | None = None) -> None:
        self._snapshot = snapshot
        self.save_count = 0

    def load(self) -> PersistedLog | None:
        return self._snapshot

    def save(self, snapshot: PersistedLog) -> None:
        self._snapshot = snapshot
        self.save_count += 1

    def clear(self) -> None:
        self._snapshot = None
