"""
Domain models for the lifecycle monitor.

Pure data structures describing host phases, emitted records, pending user
intents and detected scenarios. Records are frozen dataclasses so that the
event log can hand them out without copying.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

# =============================================================================
# ENUMERATIONS
# =============================================================================


class LifecycleState(str, Enum):
    """Operating phase of the host application."""

    UNINITIALIZED = "uninitialized"
    API_READY = "api_ready"
    USER_STARTING_NEW_GAME = "user_starting_new_game"
    USER_LOADING_SAVE = "user_loading_save"
    CITY_LOADING = "city_loading"
    GAME_INIT = "game_init"
    IN_GAME = "in_game"
    MENU = "menu"


class HostContext(str, Enum):
    """Screen or mode the host is currently presenting."""

    MAIN_MENU = "main_menu"
    IN_GAME = "in_game"
    IN_GAME_MENU = "in_game_menu"
    LOAD_SAVE_SCREEN = "load_save_screen"
    UNKNOWN = "unknown"


class EventCategory(str, Enum):
    """Category tag carried by every EventRecord."""

    SYSTEM = "system"
    API = "api"
    LIFECYCLE = "lifecycle"
    TRANSITION = "transition"
    USER_ACTION = "user_action"
    CONTEXT = "context"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class ErrorKind(str, Enum):
    """Counted anomaly kinds (probe and persistence failures are not counted)."""

    INVALID_TRANSITION = "invalid_transition"
    UNEXPECTED_HOOK_CADENCE = "unexpected_hook_cadence"
    CORRELATION_MISMATCH = "correlation_mismatch"


class IntentKind(str, Enum):
    """User interactions recognised on the presentation surface."""

    LOAD = "load"
    NEW_GAME = "new_game"
    SAVE = "save"
    OPEN_LOAD_SAVE = "open_load_save"
    MENU_TOGGLE = "menu_toggle"


class ScenarioKey(str, Enum):
    """Higher-level usage patterns."""

    NEW_GAME_FROM_MENU = "new_game_from_menu"
    LOAD_SAVE_FROM_MENU = "load_save_from_menu"
    GAME_LOAD_DIFFERENT_SAVE = "game_load_different_save"
    GAME_RELOAD_SAME_SAVE = "game_reload_same_save"


SCENARIO_NAMES: MappingProxyType[ScenarioKey, str] = MappingProxyType(
    {
        ScenarioKey.NEW_GAME_FROM_MENU: "New Game from Menu",
        ScenarioKey.LOAD_SAVE_FROM_MENU: "Load Save from Menu",
        ScenarioKey.GAME_LOAD_DIFFERENT_SAVE: "In Game → Load Different Save",
        ScenarioKey.GAME_RELOAD_SAME_SAVE: "In Game → Reload Same Save",
    }
)


class Trigger(str, Enum):
    """Points at which the scenario recognizer is consulted."""

    GAME_INIT = "game_init"
    MAP_READY = "map_ready"
    LOAD_RESOLVED = "load_resolved"


# =============================================================================
# EVENT RECORDS
# =============================================================================


@dataclass(frozen=True)
class EventRecord:
    """Single timestamped entry in the event log."""

    relative_ms: int  # Milliseconds since monitor start
    message: str
    category: EventCategory
    is_error: bool
    state: LifecycleState  # State at emission
    context: HostContext  # Context at emission
    error_kind: ErrorKind | None = None
    created_at: str = ""  # ISO 8601 wall clock


@dataclass(frozen=True)
class PersistedLog:
    """Stored form of the event log: the single keyed record."""

    events: tuple[EventRecord, ...]
    valid_transition_count: int
    error_count: int
    saved_at: str = ""


def format_timestamp(ms: int) -> str:
    """Render milliseconds as ``mm:ss.mmm``."""
    seconds, millis = divmod(ms, 1000)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}.{millis:03d}"


# =============================================================================
# CORRELATION
# =============================================================================


@dataclass(frozen=True)
class PendingAction:
    """A user intent awaiting its asynchronous completion."""

    kind: IntentKind
    target: str  # e.g. save name
    issued_at_ms: int
    origin_context: HostContext
    origin_state: LifecycleState = LifecycleState.UNINITIALIZED


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a completion against the pending intent."""

    matched: bool
    elapsed_ms: int | None = None
    origin: PendingAction | None = None
    pending: bool = True  # False when no tracked precursor existed


# =============================================================================
# SCENARIOS AND COUNTERS
# =============================================================================


@dataclass(frozen=True)
class ScenarioRecord:
    """Detection flag for one scenario."""

    key: ScenarioKey
    name: str
    detected: bool = False


@dataclass(frozen=True)
class CounterSnapshot:
    """Read-only view of the monitor counters."""

    valid_transitions: int
    error_count: int
    hook_calls: MappingProxyType[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class MonitorConfig:
    """Tunable limits for the monitor."""

    event_capacity: int = 200
    recent_window: int = 10  # Records inspected by the scenario recognizer
    demand_change_threshold: int = 2
    demand_check_grace_ms: int = 0  # Quiet period after entering play
    pending_ttl_ms: int | None = None  # None: intents never expire
    storage_key: str = "LifecycleMonitor_Events"
    ready_attempts: int = 50
    ready_initial_delay: float = 0.01  # Seconds
    ready_backoff: float = 2.0
    ready_max_delay: float = 1.0
