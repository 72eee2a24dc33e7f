"""Host signal models: one tagged variant per hook payload."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from lifecycle_monitor.domain.exceptions import HostSignalError
from lifecycle_monitor.domain.models import HostContext, IntentKind


class SignalType(str, Enum):
    """Discriminator carried by every host signal."""

    GAME_INITIALIZED = "game_initialized"
    CITY_LOADED = "city_loaded"
    MAP_READY = "map_ready"
    GAME_LOADED = "game_loaded"
    GAME_SAVED = "game_saved"
    DEMAND_CHANGED = "demand_changed"
    MODS_RELOADED = "mods_reloaded"
    INTENT_OBSERVED = "intent_observed"
    CONTEXT_CHANGED = "context_changed"


@dataclass(frozen=True)
class GameInitialized:
    """Host finished initializing a game session."""

    signal = SignalType.GAME_INITIALIZED


@dataclass(frozen=True)
class CityLoaded:
    """Host started loading a city."""

    code: str
    signal = SignalType.CITY_LOADED


@dataclass(frozen=True)
class MapReady:
    """Host map is rendered and interactive."""

    signal = SignalType.MAP_READY


@dataclass(frozen=True)
class GameLoaded:
    """Host finished loading a save."""

    name: str
    signal = SignalType.GAME_LOADED


@dataclass(frozen=True)
class GameSaved:
    """Host wrote a save."""

    name: str
    signal = SignalType.GAME_SAVED


@dataclass(frozen=True)
class DemandChanged:
    """Host recomputed demand."""

    pop_count: int
    signal = SignalType.DEMAND_CHANGED


@dataclass(frozen=True)
class ModsReloaded:
    """Host reloaded its mods; hook registrations start over."""

    signal = SignalType.MODS_RELOADED


@dataclass(frozen=True)
class IntentObserved:
    """A user interaction interpreted against the presentation surface."""

    kind: IntentKind
    target: str = ""
    context: HostContext | None = None  # None: use the probe's context
    signal = SignalType.INTENT_OBSERVED


@dataclass(frozen=True)
class ContextChanged:
    """The context probe reports a new context."""

    context: HostContext
    signal = SignalType.CONTEXT_CHANGED


HostSignal = (
    GameInitialized
    | CityLoaded
    | MapReady
    | GameLoaded
    | GameSaved
    | DemandChanged
    | ModsReloaded
    | IntentObserved
    | ContextChanged
)

_SIGNAL_CLASSES: dict[SignalType, type] = {
    SignalType.GAME_INITIALIZED: GameInitialized,
    SignalType.CITY_LOADED: CityLoaded,
    SignalType.MAP_READY: MapReady,
    SignalType.GAME_LOADED: GameLoaded,
    SignalType.GAME_SAVED: GameSaved,
    SignalType.DEMAND_CHANGED: DemandChanged,
    SignalType.MODS_RELOADED: ModsReloaded,
    SignalType.INTENT_OBSERVED: IntentObserved,
    SignalType.CONTEXT_CHANGED: ContextChanged,
}


def signal_from_payload(payload: dict[str, Any]) -> HostSignal:
    """Build a HostSignal from a ``{"signal": ..., **fields}`` payload.

    Raises:
        HostSignalError: If the tag is unknown or a field is missing/invalid.
    """
    if not isinstance(payload, dict):
        raise HostSignalError(
            f"Expected dict payload, got {type(payload).__name__}", payload
        )
    try:
        signal_type = SignalType(payload.get("signal"))
    except ValueError as e:
        raise HostSignalError(
            f"Unknown signal: {payload.get('signal')!r}", payload
        ) from e

    cls = _SIGNAL_CLASSES[signal_type]
    kwargs: dict[str, Any] = {}
    try:
        for f in fields(cls):
            if f.name in payload:
                kwargs[f.name] = payload[f.name]
        if signal_type is SignalType.INTENT_OBSERVED:
            kwargs["kind"] = IntentKind(payload["kind"])
            if kwargs.get("context") is not None:
                kwargs["context"] = HostContext(kwargs["context"])
        if signal_type is SignalType.CONTEXT_CHANGED:
            kwargs["context"] = HostContext(payload["context"])
        if signal_type is SignalType.DEMAND_CHANGED:
            kwargs["pop_count"] = int(payload["pop_count"])
        return cls(**kwargs)  # type: ignore[no-any-return]
    except (KeyError, TypeError, ValueError) as e:
        raise HostSignalError(
            f"Invalid {signal_type.value} payload: {e}", payload
        ) from e


def signal_to_payload(signal: HostSignal) -> dict[str, Any]:
    """Serialize a HostSignal to its JSON payload."""
    data: dict[str, Any] = {"signal": signal.signal.value}
    for f in fields(signal):
        value = getattr(signal, f.name)
        data[f.name] = value.value if isinstance(value, Enum) else value
    return data
