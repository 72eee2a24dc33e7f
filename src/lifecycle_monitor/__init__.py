"""
Lifecycle Monitor: runtime lifecycle observer for event-hook hosts.

Classifies the host's operating phase, validates phase transitions,
correlates user intents with their asynchronous completions and surfaces
usage scenarios and hook-cadence anomalies.

Example:
    from lifecycle_monitor import CityLoaded, LifecycleMonitor
    from lifecycle_monitor.infrastructure import InProcessHost

    host = InProcessHost()
    monitor = LifecycleMonitor()
    monitor.attach(host)

    host.fire(CityLoaded("NYC"))
    print(monitor.current_state, monitor.counters())
"""

# Application layer (engine)
from lifecycle_monitor.application.monitor import LifecycleMonitor
from lifecycle_monitor.application.readiness import RetryPolicy, wait_for_host

# Domain exceptions
from lifecycle_monitor.domain.exceptions import (
    ConfigurationError,
    HostSignalError,
    HostUnavailable,
    PersistenceError,
)

# Host signals
from lifecycle_monitor.domain.host_signal import (
    CityLoaded,
    ContextChanged,
    DemandChanged,
    GameInitialized,
    GameLoaded,
    GameSaved,
    HostSignal,
    IntentObserved,
    MapReady,
    ModsReloaded,
    signal_from_payload,
    signal_to_payload,
)

# Domain interfaces (for type hints and custom adapters)
from lifecycle_monitor.domain.interfaces import (
    ContextProbeInterface,
    HostHooksInterface,
    SnapshotStoreInterface,
)
from lifecycle_monitor.domain.models import (
    CounterSnapshot,
    EventCategory,
    EventRecord,
    HostContext,
    IntentKind,
    LifecycleState,
    MonitorConfig,
    PendingAction,
    ScenarioKey,
    ScenarioRecord,
)

__version__ = "0.3.0"

__all__ = [
    # Version
    "__version__",
    # Domain models
    "CounterSnapshot",
    "EventCategory",
    "EventRecord",
    "HostContext",
    "IntentKind",
    "LifecycleState",
    "MonitorConfig",
    "PendingAction",
    "ScenarioKey",
    "ScenarioRecord",
    # Host signals
    "HostSignal",
    "GameInitialized",
    "CityLoaded",
    "MapReady",
    "GameLoaded",
    "GameSaved",
    "DemandChanged",
    "ModsReloaded",
    "IntentObserved",
    "ContextChanged",
    "signal_from_payload",
    "signal_to_payload",
    # Domain interfaces
    "ContextProbeInterface",
    "HostHooksInterface",
    "SnapshotStoreInterface",
    # Domain exceptions
    "ConfigurationError",
    "HostSignalError",
    "HostUnavailable",
    "PersistenceError",
    # Application layer
    "LifecycleMonitor",
    "RetryPolicy",
    "wait_for_host",
]
