"""
In-process host adapter.

A minimal hook registry implementing HostHooksInterface. Callers fire hooks
directly (tests, replays, embedding hosts written in Python).
"""

from collections.abc import Callable
from typing import Any

from lifecycle_monitor.domain.exceptions import HostSignalError
from lifecycle_monitor.domain.host_signal import (
    CityLoaded,
    DemandChanged,
    GameInitialized,
    GameLoaded,
    GameSaved,
    HostSignal,
    MapReady,
    ModsReloaded,
    SignalType,
)
from lifecycle_monitor.domain.interfaces import HostHooksInterface, Unsubscribe


class InProcessHost(HostHooksInterface):
    """Hook registry with synchronous dispatch in registration order."""

    def __init__(self) -> None:
        self._callbacks: dict[SignalType, list[Callable[..., None]]] = {}

    def _register(
        self, signal_type: SignalType, callback: Callable[..., None]
    ) -> Unsubscribe:
        callbacks = self._callbacks.setdefault(signal_type, [])
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def on_game_init(self, callback: Callable[[], None]) -> Unsubscribe:
        return self._register(SignalType.GAME_INITIALIZED, callback)

    def on_city_load(self, callback: Callable[[str], None]) -> Unsubscribe:
        return self._register(SignalType.CITY_LOADED, callback)

    def on_map_ready(self, callback: Callable[[], None]) -> Unsubscribe:
        return self._register(SignalType.MAP_READY, callback)

    def on_game_loaded(self, callback: Callable[[str], None]) -> Unsubscribe:
        return self._register(SignalType.GAME_LOADED, callback)

    def on_game_saved(self, callback: Callable[[str], None]) -> Unsubscribe:
        return self._register(SignalType.GAME_SAVED, callback)

    def on_demand_change(self, callback: Callable[[int], None]) -> Unsubscribe:
        return self._register(SignalType.DEMAND_CHANGED, callback)

    def on_mods_reloaded(self, callback: Callable[[], None]) -> Unsubscribe:
        return self._register(SignalType.MODS_RELOADED, callback)

    def listener_count(self, signal_type: SignalType) -> int:
        return len(self._callbacks.get(signal_type, []))

    def _dispatch(self, signal_type: SignalType, *args: Any) -> None:
        for callback in list(self._callbacks.get(signal_type, [])):
            callback(*args)

    def fire(self, signal: HostSignal) -> None:
        """
        Invoke every callback registered for a hook signal.

        Raises:
            HostSignalError: If ``signal`` is not a host hook
        """
        match signal:
            case GameInitialized() | MapReady() | ModsReloaded():
                self._dispatch(signal.signal)
            case CityLoaded(code=code):
                self._dispatch(signal.signal, code)
            case GameLoaded(name=name) | GameSaved(name=name):
                self._dispatch(signal.signal, name)
            case DemandChanged(pop_count=pop_count):
                self._dispatch(signal.signal, pop_count)
            case _:
                raise HostSignalError(
                    f"{signal.signal.value} is not a host hook", signal
                )
