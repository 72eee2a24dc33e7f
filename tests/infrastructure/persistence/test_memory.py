"""Tests for InMemorySnapshotStore."""

from lifecycle_monitor.domain.models import PersistedLog
from lifecycle_monitor.infrastructure.persistence.memory import InMemorySnapshotStore


class TestInMemorySnapshotStore:
    """Tests for the in-memory store."""

    def test_empty_store_loads_none(self):
        """A fresh store holds no record."""
        assert InMemorySnapshotStore().load() is None

    def test_save_replaces_record(self):
        """The single record is replaced on every save."""
        store = InMemorySnapshotStore()
        first = PersistedLog(events=(), valid_transition_count=1, error_count=0)
        second = PersistedLog(events=(), valid_transition_count=2, error_count=1)

        store.save(first)
        store.save(second)

        assert store.load() == second
        assert store.save_count == 2

    def test_clear(self):
        """clear() removes the record."""
        store = InMemorySnapshotStore(
            PersistedLog(events=(), valid_transition_count=0, error_count=0)
        )

        store.clear()

        assert store.load() is None
