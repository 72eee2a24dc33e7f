"""Event record emission service."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.exceptions import PersistenceError
from lifecycle_monitor.domain.interfaces import (
    EventSinkInterface,
    SnapshotStoreInterface,
)
from lifecycle_monitor.domain.models import (
    ErrorKind,
    EventCategory,
    EventRecord,
    HostContext,
    LifecycleState,
    format_timestamp,
)

event_logger = logging.getLogger("lifecycle_monitor.events")
persistence_logger = logging.getLogger("lifecycle_monitor.persistence")

_ICONS = {
    EventCategory.SYSTEM: "🔧",
    EventCategory.API: "⚙️",
    EventCategory.USER_ACTION: "👆",
    EventCategory.CONTEXT: "🔄",
}


class EventRecorder(EventSinkInterface):
    """Emits EventRecords to the log.

    Stamps each record with the relative time, current state and context,
    mirrors it to the ``lifecycle_monitor.events`` logger and persists the
    log when a store is configured. Store failures, including raw I/O errors
    from adapters, are reported on the ``lifecycle_monitor.persistence``
    logger and never propagate.
    """

    def __init__(
        self,
        log: EventLog,
        clock_ms: Callable[[], int],
        state: Callable[[], LifecycleState],
        context: Callable[[], HostContext],
        store: SnapshotStoreInterface | None = None,
    ) -> None:
        self._log = log
        self._clock_ms = clock_ms
        self._state = state
        self._context = context
        self._store = store

    def _now(self) -> str:
        return datetime.now(UTC).isoformat()

    def record(
        self,
        message: str,
        category: EventCategory,
        error_kind: ErrorKind | None = None,
    ) -> EventRecord:
        is_error = category is EventCategory.ERROR
        event = EventRecord(
            relative_ms=self._clock_ms(),
            message=message,
            category=category,
            is_error=is_error,
            state=self._state(),
            context=self._context(),
            error_kind=error_kind,
            created_at=self._now(),
        )
        self._log.append(event)
        self.persist()

        icon = "❌" if is_error else _ICONS.get(category, "🎮")
        event_logger.log(
            logging.ERROR if is_error else logging.INFO,
            "[LIFECYCLE] %s %s - %s",
            icon,
            format_timestamp(event.relative_ms),
            message,
        )
        return event

    def system(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.SYSTEM)

    def api(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.API)

    def lifecycle(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.LIFECYCLE)

    def user_action(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.USER_ACTION)

    def context(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.CONTEXT)

    def info(self, message: str) -> EventRecord:
        return self.record(message, EventCategory.INFO)

    def persist(self) -> None:
        """Write the log to the store, if any."""
        if self._store is None:
            return
        try:
            self._store.save(self._log.to_persisted(saved_at=self._now()))
        except (PersistenceError, OSError):
            persistence_logger.exception("Failed to save events")

    def restore(self) -> bool:
        """Merge the stored log into memory. Returns True if anything was loaded."""
        if self._store is None:
            return False
        try:
            persisted = self._store.load()
        except (PersistenceError, OSError):
            persistence_logger.exception("Failed to load events")
            return False
        if persisted is None:
            return False
        self._log.merge(persisted)
        return True
