"""
Domain layer for the lifecycle monitor.

Contains the state machine, correlation and detection logic with no
external dependencies.
"""

from lifecycle_monitor.domain.correlator import PendingActionCorrelator
from lifecycle_monitor.domain.detectors import (
    DemandCadenceDetector,
    Hook,
    HookCadenceDetector,
    HookCallCounters,
)
from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.exceptions import (
    ConfigurationError,
    HostSignalError,
    HostUnavailable,
    PersistenceError,
)
from lifecycle_monitor.domain.interfaces import (
    ContextProbeInterface,
    EventSinkInterface,
    HostHooksInterface,
    SnapshotStoreInterface,
)
from lifecycle_monitor.domain.models import (
    CounterSnapshot,
    ErrorKind,
    EventCategory,
    EventRecord,
    HostContext,
    IntentKind,
    LifecycleState,
    MonitorConfig,
    PendingAction,
    PersistedLog,
    Resolution,
    ScenarioKey,
    ScenarioRecord,
    Trigger,
)
from lifecycle_monitor.domain.scenarios import ScenarioRecognizer, classify_scenario
from lifecycle_monitor.domain.state_machine import (
    DEFAULT_TRANSITIONS,
    LifecycleStateMachine,
    TransitionTable,
)

__all__ = [
    # Models
    "CounterSnapshot",
    "ErrorKind",
    "EventCategory",
    "EventRecord",
    "HostContext",
    "IntentKind",
    "LifecycleState",
    "MonitorConfig",
    "PendingAction",
    "PersistedLog",
    "Resolution",
    "ScenarioKey",
    "ScenarioRecord",
    "Trigger",
    # Core components
    "EventLog",
    "TransitionTable",
    "DEFAULT_TRANSITIONS",
    "LifecycleStateMachine",
    "PendingActionCorrelator",
    "Hook",
    "HookCallCounters",
    "HookCadenceDetector",
    "DemandCadenceDetector",
    "ScenarioRecognizer",
    "classify_scenario",
    # Interfaces
    "EventSinkInterface",
    "SnapshotStoreInterface",
    "ContextProbeInterface",
    "HostHooksInterface",
    # Exceptions
    "HostSignalError",
    "PersistenceError",
    "ConfigurationError",
    "HostUnavailable",
]
