"""
Lifecycle monitor engine.

Owns the state machine, event log, correlator, detectors and scenario
recognizer for one host session. Host hooks, context changes and user
intents are ingested as HostSignals; each ingestion runs to completion
before the next one starts, so records land in dispatch order.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import jsonschema

from lifecycle_monitor.application.event_recorder import EventRecorder
from lifecycle_monitor.application.readiness import RetryPolicy, wait_for_host
from lifecycle_monitor.domain.correlator import PendingActionCorrelator
from lifecycle_monitor.domain.detectors import (
    DemandCadenceDetector,
    Hook,
    HookCadenceDetector,
    HookCallCounters,
)
from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.exceptions import HostSignalError, HostUnavailable
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
)
from lifecycle_monitor.domain.models import (
    CounterSnapshot,
    EventRecord,
    HostContext,
    IntentKind,
    LifecycleState,
    MonitorConfig,
    PendingAction,
    ScenarioRecord,
    Trigger,
    format_timestamp,
)
from lifecycle_monitor.domain.scenarios import (
    NEW_GAME_ACTION_MESSAGE,
    ScenarioRecognizer,
)
from lifecycle_monitor.domain.state_machine import (
    DEFAULT_TRANSITIONS,
    LifecycleStateMachine,
    TransitionTable,
)
from lifecycle_monitor.schemas import validate_signal

if TYPE_CHECKING:
    from lifecycle_monitor.domain.interfaces import (
        ContextProbeInterface,
        HostHooksInterface,
        SnapshotStoreInterface,
        Unsubscribe,
    )

logger = logging.getLogger(__name__)


class LifecycleMonitor:
    """
    Explicitly constructed engine for one host session.

    Presentation code reads snapshots (``current_state``, ``recent_events``,
    ``scenarios``, ``counters``) and issues ``clear`` / ``export_snapshot``.
    Nothing here raises into the host: every anomaly is recorded and the
    monitor carries on.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        store: SnapshotStoreInterface | None = None,
        probe: ContextProbeInterface | None = None,
        clock: Callable[[], float] = time.monotonic,
        table: TransitionTable = DEFAULT_TRANSITIONS,
    ) -> None:
        self.config = config or MonitorConfig()
        self._clock = clock
        self._started_at = clock()
        self._probe = probe
        self._context = probe.current_context() if probe else HostContext.UNKNOWN

        self._log = EventLog(self.config.event_capacity)
        self._recorder = EventRecorder(
            self._log,
            clock_ms=self.clock_ms,
            state=lambda: self._machine.current_state,
            context=lambda: self._context,
            store=store,
        )
        self._machine = LifecycleStateMachine(self._recorder, self._log, table)
        self._correlator = PendingActionCorrelator(
            self._recorder,
            self._log,
            clock_ms=self.clock_ms,
            ttl_ms=self.config.pending_ttl_ms,
        )
        self._hook_counts = HookCallCounters()
        self._cadence = HookCadenceDetector(self._recorder, self._log)
        self._demand = DemandCadenceDetector(
            self._recorder,
            self._log,
            self.config.demand_change_threshold,
            self.config.demand_check_grace_ms,
        )
        self._scenarios = ScenarioRecognizer()

        self.save_name: str | None = None
        self.city_code: str | None = None
        self._unsubscribers: list[Unsubscribe] = []
        self._handlers: dict[type, Callable[[Any], None]] = {
            GameInitialized: self._on_game_init,
            CityLoaded: self._on_city_load,
            MapReady: self._on_map_ready,
            GameLoaded: self._on_game_loaded,
            GameSaved: self._on_game_saved,
            DemandChanged: self._on_demand_change,
            ModsReloaded: self._on_mods_reloaded,
            IntentObserved: self._on_intent,
            ContextChanged: self._on_context_changed,
        }

        if self._recorder.restore():
            logger.info("Restored %d persisted event(s)", len(self._log))
        self._recorder.system("Script Loaded")
        if probe is not None:
            self._unsubscribers.append(
                probe.subscribe(lambda ctx: self.ingest(ContextChanged(ctx)))
            )

    # =========================================================================
    # HOST ATTACHMENT
    # =========================================================================

    def clock_ms(self) -> int:
        """Milliseconds since the monitor was constructed."""
        return int((self._clock() - self._started_at) * 1000)

    def attach(self, hooks: HostHooksInterface) -> None:
        """Register every hook with the host and enter API_READY."""
        self._recorder.api("API Available")
        self._machine.transition(LifecycleState.API_READY)
        self._unsubscribers.extend(
            [
                hooks.on_game_init(lambda: self.ingest(GameInitialized())),
                hooks.on_city_load(lambda code: self.ingest(CityLoaded(code))),
                hooks.on_map_ready(lambda: self.ingest(MapReady())),
                hooks.on_game_loaded(lambda name: self.ingest(GameLoaded(name))),
                hooks.on_game_saved(lambda name: self.ingest(GameSaved(name))),
                hooks.on_demand_change(
                    lambda pops: self.ingest(DemandChanged(pops))
                ),
                hooks.on_mods_reloaded(lambda: self.ingest(ModsReloaded())),
            ]
        )

    def detach(self) -> None:
        """Remove every hook and probe registration."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def start(
        self,
        resolve: Callable[[], HostHooksInterface | None],
        policy: RetryPolicy | None = None,
    ) -> bool:
        """
        Await the host hook API once, then attach.

        Returns:
            True if attached, False if the host never became available
        """
        try:
            hooks = await wait_for_host(
                resolve, policy or RetryPolicy.from_config(self.config)
            )
        except HostUnavailable as e:
            logger.warning("%s", e)
            self._recorder.info(f"Host API unavailable after {e.attempts} attempts")
            return False
        self.attach(hooks)
        return True

    # =========================================================================
    # INGESTION
    # =========================================================================

    def ingest(self, signal: HostSignal) -> None:
        """Dispatch one host signal to its handler."""
        self._handlers[type(signal)](signal)

    def ingest_payload(self, payload: dict[str, Any]) -> bool:
        """
        Validate and dispatch a raw host payload.

        Returns:
            False if the payload was rejected at the boundary
        """
        try:
            validate_signal(payload)
            signal = signal_from_payload(payload)
        except jsonschema.ValidationError as e:
            logger.warning("Rejected host payload %r: %s", payload, e.message)
            return False
        except HostSignalError as e:
            logger.warning("Rejected host payload %r: %s", payload, e)
            return False
        self.ingest(signal)
        return True

    def transition(self, new_state: LifecycleState) -> bool:
        """Apply a transition; entering IN_GAME opens the demand window."""
        accepted = self._machine.transition(new_state)
        if accepted and new_state is LifecycleState.IN_GAME:
            self._demand.enter_game(self.clock_ms())
        return accepted

    def poll(self) -> None:
        """Timer-driven reaction: re-run checks that need no host signal."""
        self._demand.check(self._machine.current_state, self.clock_ms())

    def _count_hook(self, hook: Hook, detail: str = "") -> None:
        """Count a firing, record it, then apply the duplicate-call rule."""
        count = self._hook_counts.increment(hook)
        label = self._cadence.rule(hook).label
        self._recorder.lifecycle(f"{label}{detail} (call #{count})")
        self._cadence.check(hook, count, self._machine.current_state)

    def _drive(self, hook: Hook) -> bool:
        """Apply the state-gated transition rule for ``hook``."""
        rule = self._cadence.rule(hook)
        state = self._machine.current_state
        target = rule.drives_to
        if target is None or not rule.drives_transition(state):
            self._recorder.info(f"{rule.label} in unexpected state: {state.value}")
            return False
        return self.transition(target)

    def _recent(self) -> tuple[EventRecord, ...]:
        return self._log.recent(self.config.recent_window)

    def _on_game_init(self, signal: GameInitialized) -> None:
        self._count_hook(Hook.GAME_INIT)
        if self._drive(Hook.GAME_INIT):
            self._scenarios.observe(Trigger.GAME_INIT, self._recent(), self.save_name)
        self.poll()

    def _on_city_load(self, signal: CityLoaded) -> None:
        self.city_code = signal.code
        self._count_hook(Hook.CITY_LOAD, f": {signal.code}")
        self._drive(Hook.CITY_LOAD)
        self.poll()

    def _on_map_ready(self, signal: MapReady) -> None:
        self._count_hook(Hook.MAP_READY)
        entered = self._drive(Hook.MAP_READY)
        self._scenarios.observe(Trigger.MAP_READY, self._recent(), self.save_name)
        # In-game demand firings can only be seen from the next reaction on
        if not entered:
            self.poll()

    def _on_game_loaded(self, signal: GameLoaded) -> None:
        previous = self.save_name
        self.save_name = signal.name
        same = " (SAME)" if previous == signal.name else ""
        self._recorder.lifecycle(f"Game Loaded: {signal.name}{same}")

        resolution = self._correlator.resolve(IntentKind.LOAD, signal.name)
        if resolution.origin is not None:
            self._scenarios.observe(
                Trigger.LOAD_RESOLVED,
                self._recent(),
                current_save=signal.name,
                previous_save=previous,
                origin=resolution.origin,
            )
        self.poll()

    def _on_game_saved(self, signal: GameSaved) -> None:
        self.save_name = signal.name
        self._recorder.lifecycle(f"Game Saved: {signal.name}")
        self.poll()

    def _on_demand_change(self, signal: DemandChanged) -> None:
        count = self._hook_counts.increment(Hook.DEMAND_CHANGE)
        in_game = self._machine.current_state is LifecycleState.IN_GAME
        self._demand.observe(in_game)
        phase = "in-game" if in_game else "before game"
        self._recorder.lifecycle(
            f"onDemandChange fired (call #{count}, {phase}, {signal.pop_count} pops)"
        )
        self.poll()

    def _on_mods_reloaded(self, signal: ModsReloaded) -> None:
        self._hook_counts.reset()
        self._demand.reset()
        self._recorder.system("Mods reloaded: hook counters reset")

    def _on_intent(self, signal: IntentObserved) -> None:
        context = signal.context or self._context
        state = self._machine.current_state

        if signal.kind is IntentKind.LOAD:
            self._recorder.user_action(
                f'User clicked: Load "{signal.target}" (from {context.value})'
            )
            self._correlator.record_intent(
                IntentKind.LOAD, signal.target, context, state
            )
            self._recorder.system(f'...waiting for "{signal.target}" to load')
            self._drive_intent(LifecycleState.USER_LOADING_SAVE, "Load")
        elif signal.kind is IntentKind.NEW_GAME:
            self._recorder.user_action(NEW_GAME_ACTION_MESSAGE)
            self.save_name = None
            self._drive_intent(LifecycleState.USER_STARTING_NEW_GAME, "New Game")
        elif signal.kind is IntentKind.SAVE:
            self._recorder.user_action(
                f'User clicked: Save "{signal.target or "unnamed"}"'
            )
        elif signal.kind is IntentKind.OPEN_LOAD_SAVE:
            origin = "Main Menu" if context is HostContext.MAIN_MENU else "In-Game"
            self._recorder.user_action(f"User clicked: Load/Save (from {origin})")
        else:
            self._recorder.user_action("User clicked: Menu toggle")

    def _drive_intent(self, target: LifecycleState, label: str) -> None:
        state = self._machine.current_state
        if state is LifecycleState.UNINITIALIZED or not self._machine.table.allows(
            state, target
        ):
            self._recorder.info(f"{label} requested in state: {state.value}")
            return
        self.transition(target)

    def _on_context_changed(self, signal: ContextChanged) -> None:
        old = self._context
        if signal.context is old:
            return
        self._context = signal.context
        if old is not HostContext.UNKNOWN:
            self._recorder.context(f"Context: {old.value} → {signal.context.value}")
        if (
            signal.context is HostContext.MAIN_MENU
            and self._machine.current_state is LifecycleState.IN_GAME
        ):
            self.transition(LifecycleState.MENU)

    # =========================================================================
    # READ API
    # =========================================================================

    @property
    def current_state(self) -> LifecycleState:
        return self._machine.current_state

    @property
    def current_context(self) -> HostContext:
        return self._context

    @property
    def correlator(self) -> PendingActionCorrelator:
        return self._correlator

    def recent_events(self, n: int) -> tuple[EventRecord, ...]:
        return self._log.recent(n)

    def events(self) -> tuple[EventRecord, ...]:
        return self._log.all()

    def scenarios(self) -> MappingProxyType[str, ScenarioRecord]:
        return MappingProxyType(
            {record.key.value: record for record in self._scenarios.records()}
        )

    def counters(self) -> CounterSnapshot:
        hook_calls = self._hook_counts.as_dict()
        hook_calls["onDemandChangeBeforeGame"] = self._demand.before_game
        hook_calls["onDemandChangeDuringGame"] = self._demand.during_game
        return CounterSnapshot(
            valid_transitions=self._log.valid_transition_count,
            error_count=self._log.error_count,
            hook_calls=MappingProxyType(hook_calls),
        )

    def pending_actions(self) -> tuple[PendingAction, ...]:
        return self._correlator.all_pending()

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def clear(self) -> None:
        """Empty the log and reset every counter and scenario flag."""
        self._log.clear()
        self._hook_counts.reset()
        self._demand.reset()
        self._scenarios.clear()
        self._recorder.system("Log Cleared")

    def export_snapshot(self) -> dict[str, Any]:
        """Build the export document, then record that it was exported."""
        counters = self.counters()
        data = {
            "exportedAt": datetime.now(UTC).isoformat(),
            "storageKey": self.config.storage_key,
            "currentState": self.current_state.value,
            "currentContext": self._context.value,
            "saveName": self.save_name,
            "cityCode": self.city_code,
            "validTransitions": counters.valid_transitions,
            "errorCount": counters.error_count,
            "hookCalls": dict(counters.hook_calls),
            "scenarios": {
                key: record.detected for key, record in self.scenarios().items()
            },
            "pendingActions": [
                {
                    "kind": action.kind.value,
                    "target": action.target,
                    "issuedAt": format_timestamp(action.issued_at_ms),
                    "context": action.origin_context.value,
                }
                for action in self.pending_actions()
            ],
            "events": [
                {
                    "timestamp": format_timestamp(e.relative_ms),
                    "message": e.message,
                    "type": e.category.value,
                    "isError": e.is_error,
                    "state": e.state.value,
                    "context": e.context.value,
                }
                for e in self._log.all()
            ],
        }
        self._recorder.system("Logs Exported")
        return data
