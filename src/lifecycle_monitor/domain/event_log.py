"""
Bounded, append-only event log.

The log owns the valid-transition and error counters so that clearing the
log and resetting the counters is one operation.
"""

from collections import deque

from lifecycle_monitor.domain.models import EventRecord, PersistedLog


class EventLog:
    """FIFO ring buffer of EventRecords with its counters."""

    def __init__(self, capacity: int = 200) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._events: deque[EventRecord] = deque(maxlen=capacity)
        self.valid_transition_count = 0
        self.error_count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._events)

    def append(self, record: EventRecord) -> None:
        """Append a record, evicting the oldest once capacity is exceeded."""
        self._events.append(record)

    def recent(self, n: int) -> tuple[EventRecord, ...]:
        """Return the last ``n`` records in insertion order."""
        if n <= 0:
            return ()
        start = max(len(self._events) - n, 0)
        return tuple(self._events)[start:]

    def all(self) -> tuple[EventRecord, ...]:
        return tuple(self._events)

    def count_valid_transition(self) -> None:
        self.valid_transition_count += 1

    def count_error(self) -> None:
        self.error_count += 1

    def clear(self) -> None:
        """Empty the log and reset both counters."""
        self._events.clear()
        self.valid_transition_count = 0
        self.error_count = 0

    def to_persisted(self, saved_at: str = "") -> PersistedLog:
        return PersistedLog(
            events=tuple(self._events),
            valid_transition_count=self.valid_transition_count,
            error_count=self.error_count,
            saved_at=saved_at,
        )

    def merge(self, persisted: PersistedLog) -> None:
        """
        Merge a restored log in front of the current contents.

        Restored records precede anything recorded since start; counters add.
        Restored records keep the ``relative_ms`` of the session that wrote
        them, so timestamps restart at the session boundary and the log is
        ordered by insertion, not by ``relative_ms``. ``created_at`` carries
        the wall clock across sessions.
        """
        current = tuple(self._events)
        self._events.clear()
        self._events.extend(persisted.events)
        self._events.extend(current)
        self.valid_transition_count += persisted.valid_transition_count
        self.error_count += persisted.error_count
