"""
Domain interfaces (Ports) for the lifecycle monitor.

These abstract base classes define the contracts that adapters must satisfy.
They have no external dependencies and mark the boundary between the
monitor core and the host it observes.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lifecycle_monitor.domain.models import (
        ErrorKind,
        EventCategory,
        EventRecord,
        HostContext,
        PersistedLog,
    )

Unsubscribe = Callable[[], None]


class EventSinkInterface(ABC):
    """
    Port through which core components emit records.

    The sink stamps each record with the current time, state and context
    and appends it to the event log.
    """

    @abstractmethod
    def record(
        self,
        message: str,
        category: "EventCategory",
        error_kind: "ErrorKind | None" = None,
    ) -> "EventRecord":
        """
        Emit a record.

        Args:
            message: Human-readable description
            category: Record category; ERROR marks the record as an error
            error_kind: Anomaly kind for counted errors

        Returns:
            The appended EventRecord
        """
        pass


class SnapshotStoreInterface(ABC):
    """
    Port for persisting the event log.

    Implementations hold a single keyed record. Failures raise
    PersistenceError; callers decide how to degrade.
    """

    @abstractmethod
    def load(self) -> "PersistedLog | None":
        """
        Read the stored log.

        Returns:
            The stored PersistedLog, or None if nothing was stored

        Raises:
            PersistenceError: If the record exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, snapshot: "PersistedLog") -> None:
        """
        Replace the stored log.

        Raises:
            PersistenceError: If the record cannot be written
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored record."""
        pass


class ContextProbeInterface(ABC):
    """
    Port answering "what is the host showing right now".

    The concrete mechanism (structural observation, polling, native events)
    is hidden behind this push-based contract.
    """

    @abstractmethod
    def current_context(self) -> "HostContext":
        """Return the current context, UNKNOWN if it cannot be determined."""
        pass

    @abstractmethod
    def subscribe(self, callback: Callable[["HostContext"], None]) -> Unsubscribe:
        """
        Register a change callback.

        Args:
            callback: Invoked with the new context whenever it changes

        Returns:
            Callable that removes the registration
        """
        pass


class HostHooksInterface(ABC):
    """
    Port for the host hook registration API.

    Each registration returns an unsubscribe handle. The host may fire any
    hook 0..N times per session.
    """

    @abstractmethod
    def on_game_init(self, callback: Callable[[], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_city_load(self, callback: Callable[[str], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_map_ready(self, callback: Callable[[], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_game_loaded(self, callback: Callable[[str], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_game_saved(self, callback: Callable[[str], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_demand_change(self, callback: Callable[[int], None]) -> Unsubscribe:
        pass

    @abstractmethod
    def on_mods_reloaded(self, callback: Callable[[], None]) -> Unsubscribe:
        pass
