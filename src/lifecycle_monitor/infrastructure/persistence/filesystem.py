"""
Filesystem implementation of the snapshot store.

Keeps the event log as one JSON document named after the storage key,
replaced atomically on every save.
"""

import json
from pathlib import Path
from typing import Any

import jsonschema

from lifecycle_monitor.domain.exceptions import PersistenceError
from lifecycle_monitor.domain.interfaces import SnapshotStoreInterface
from lifecycle_monitor.domain.models import (
    ErrorKind,
    EventCategory,
    EventRecord,
    HostContext,
    LifecycleState,
    PersistedLog,
)
from lifecycle_monitor.schemas import validate_snapshot


def event_to_dict(event: EventRecord) -> dict[str, Any]:
    """Serialize an EventRecord to its stored form."""
    return {
        "timestamp": event.relative_ms,
        "message": event.message,
        "type": event.category.value,
        "isError": event.is_error,
        "state": event.state.value,
        "context": event.context.value,
        "errorKind": event.error_kind.value if event.error_kind else None,
        "time": event.created_at,
    }


def dict_to_event(data: dict[str, Any]) -> EventRecord:
    """Deserialize a stored event."""
    error_kind = data.get("errorKind")
    return EventRecord(
        relative_ms=data["timestamp"],
        message=data["message"],
        category=EventCategory(data["type"]),
        is_error=data["isError"],
        state=LifecycleState(data["state"]),
        context=HostContext(data["context"]),
        error_kind=ErrorKind(error_kind) if error_kind else None,
        created_at=data.get("time", ""),
    )


def persisted_to_dict(snapshot: PersistedLog) -> dict[str, Any]:
    return {
        "events": [event_to_dict(e) for e in snapshot.events],
        "validTransitionCount": snapshot.valid_transition_count,
        "errorCount": snapshot.error_count,
        "savedAt": snapshot.saved_at,
    }


def dict_to_persisted(data: dict[str, Any]) -> PersistedLog:
    return PersistedLog(
        events=tuple(dict_to_event(e) for e in data.get("events", [])),
        valid_transition_count=data.get("validTransitionCount", 0),
        error_count=data.get("errorCount", 0),
        saved_at=data.get("savedAt", ""),
    )


class FilesystemSnapshotStore(SnapshotStoreInterface):
    """
    Persistent single-record store.

    The record lives at ``<base_dir>/<storage_key>.json``.
    """

    def __init__(self, base_dir: str | Path, storage_key: str) -> None:
        self._base_dir = Path(base_dir)
        self._storage_key = storage_key
        self.path = self._base_dir / f"{storage_key}.json"

    def load(self) -> PersistedLog | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                data = json.load(f)
            validate_snapshot(data)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(
                f"Cannot read {self.path}: {e}", self._storage_key
            ) from e
        except jsonschema.ValidationError as e:
            raise PersistenceError(
                f"Invalid snapshot in {self.path}: {e.message}", self._storage_key
            ) from e
        return dict_to_persisted(data)

    def save(self, snapshot: PersistedLog) -> None:
        """Atomically replace the record using write-to-temp + rename."""
        temp_path = self.path.with_suffix(".tmp")
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w") as f:
                json.dump(persisted_to_dict(snapshot), f, indent=2)
            temp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(
                f"Cannot write {self.path}: {e}", self._storage_key
            ) from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot remove {self.path}: {e}", self._storage_key
            ) from e
