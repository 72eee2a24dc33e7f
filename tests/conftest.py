"""Shared pytest fixtures for lifecycle_monitor tests."""

import pytest

from lifecycle_monitor.application.monitor import LifecycleMonitor
from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.interfaces import EventSinkInterface
from lifecycle_monitor.domain.models import (
    ErrorKind,
    EventCategory,
    EventRecord,
    HostContext,
    LifecycleState,
)
from lifecycle_monitor.infrastructure.host import InProcessHost
from lifecycle_monitor.infrastructure.persistence.memory import InMemorySnapshotStore
from lifecycle_monitor.infrastructure.probe import StaticContextProbe


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000


class CollectingSink(EventSinkInterface):
    """Sink appending records to a log with a fixed state and context."""

    def __init__(self, log: EventLog) -> None:
        self.log = log
        self.state = LifecycleState.UNINITIALIZED
        self.context = HostContext.UNKNOWN
        self.now_ms = 0

    def record(
        self,
        message: str,
        category: EventCategory,
        error_kind: ErrorKind | None = None,
    ) -> EventRecord:
        event = EventRecord(
            relative_ms=self.now_ms,
            message=message,
            category=category,
            is_error=category is EventCategory.ERROR,
            state=self.state,
            context=self.context,
            error_kind=error_kind,
        )
        self.log.append(event)
        return event

    def categories(self) -> list[EventCategory]:
        return [e.category for e in self.log.all()]

    def messages(self) -> list[str]:
        return [e.message for e in self.log.all()]


@pytest.fixture
def event_log() -> EventLog:
    """Create an event log with default capacity."""
    return EventLog()


@pytest.fixture
def sink(event_log: EventLog) -> CollectingSink:
    """Create a collecting sink backed by ``event_log``."""
    return CollectingSink(event_log)


@pytest.fixture
def clock() -> FakeClock:
    """Create a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def store() -> InMemorySnapshotStore:
    """Create an empty in-memory snapshot store."""
    return InMemorySnapshotStore()


@pytest.fixture
def probe() -> StaticContextProbe:
    """Create a context probe starting at UNKNOWN."""
    return StaticContextProbe()


@pytest.fixture
def host() -> InProcessHost:
    """Create an in-process host."""
    return InProcessHost()


@pytest.fixture
def monitor(
    clock: FakeClock, store: InMemorySnapshotStore, probe: StaticContextProbe
) -> LifecycleMonitor:
    """Create a monitor that is not yet attached to a host."""
    return LifecycleMonitor(store=store, probe=probe, clock=clock)


@pytest.fixture
def attached_monitor(monitor: LifecycleMonitor, host: InProcessHost) -> LifecycleMonitor:
    """Create a monitor attached to ``host`` (state API_READY)."""
    monitor.attach(host)
    return monitor
