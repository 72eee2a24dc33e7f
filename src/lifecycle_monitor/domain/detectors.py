"""
Hook call counters and anomaly detectors.

Each host hook has a rule describing when a repeat firing is implausible
and which states it may drive a transition from. The demand-change detector
encodes a known host defect: the signal should recur during play but only
fires before it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.interfaces import EventSinkInterface
from lifecycle_monitor.domain.models import ErrorKind, EventCategory, LifecycleState

S = LifecycleState


class Hook(str, Enum):
    """Counted host hooks, valued by their export key."""

    GAME_INIT = "gameInit"
    CITY_LOAD = "cityLoad"
    MAP_READY = "mapReady"
    DEMAND_CHANGE = "onDemandChange"


@dataclass(frozen=True)
class HookRule:
    """Cadence and transition rule for one hook."""

    label: str
    is_duplicate: Callable[[int, LifecycleState], bool]
    drives_from: frozenset[LifecycleState] = frozenset()
    drives_to: LifecycleState | None = None

    def drives_transition(self, state: LifecycleState) -> bool:
        return self.drives_to is not None and state in self.drives_from


HOOK_RULES: MappingProxyType[Hook, HookRule] = MappingProxyType(
    {
        Hook.GAME_INIT: HookRule(
            label="Game Init",
            is_duplicate=lambda count, state: count > 1,
            drives_from=frozenset(
                {
                    S.CITY_LOADING,
                    S.USER_STARTING_NEW_GAME,
                    S.USER_LOADING_SAVE,
                    S.API_READY,
                }
            ),
            drives_to=S.GAME_INIT,
        ),
        Hook.CITY_LOAD: HookRule(
            label="City Load",
            is_duplicate=lambda count, state: (
                count > 1 and state not in (S.IN_GAME, S.GAME_INIT)
            ),
            drives_from=frozenset(
                {
                    S.API_READY,
                    S.MENU,
                    S.USER_STARTING_NEW_GAME,
                    S.USER_LOADING_SAVE,
                    S.IN_GAME,
                    S.GAME_INIT,
                }
            ),
            drives_to=S.CITY_LOADING,
        ),
        Hook.MAP_READY: HookRule(
            label="Map Ready",
            is_duplicate=lambda count, state: count > 1 and state is S.IN_GAME,
            drives_from=frozenset({S.GAME_INIT, S.CITY_LOADING}),
            drives_to=S.IN_GAME,
        ),
    }
)


@dataclass
class HookCallCounters:
    """Mutable per-hook invocation counts."""

    counts: dict[Hook, int] = field(default_factory=lambda: dict.fromkeys(Hook, 0))

    def increment(self, hook: Hook) -> int:
        self.counts[hook] = self.counts.get(hook, 0) + 1
        return self.counts[hook]

    def get(self, hook: Hook) -> int:
        return self.counts.get(hook, 0)

    def reset(self) -> None:
        self.counts = dict.fromkeys(Hook, 0)

    def as_dict(self) -> dict[str, int]:
        return {hook.value: count for hook, count in self.counts.items()}


class HookCadenceDetector:
    """Flags hooks that fire more often than their phase allows."""

    def __init__(
        self,
        sink: EventSinkInterface,
        log: EventLog,
        rules: MappingProxyType[Hook, HookRule] = HOOK_RULES,
    ) -> None:
        self._sink = sink
        self._log = log
        self._rules = rules

    def rule(self, hook: Hook) -> HookRule:
        return self._rules[hook]

    def check(self, hook: Hook, count: int, state: LifecycleState) -> bool:
        """Record an error if ``count`` is implausible in ``state``."""
        rule = self._rules[hook]
        if not rule.is_duplicate(count, state):
            return False
        self._log.count_error()
        self._sink.record(
            f"{rule.label} called multiple times! ({count} total)",
            EventCategory.ERROR,
            ErrorKind.UNEXPECTED_HOOK_CADENCE,
        )
        return True


class DemandCadenceDetector:
    """
    Detects demand-change firing only before gameplay.

    Flags once per session, when at least ``threshold`` pre-game firings
    were seen and none during play. Play must have been observed first: the
    check is armed by ``enter_game`` and stays quiet until ``grace_ms`` have
    passed since entry.
    """

    def __init__(
        self,
        sink: EventSinkInterface,
        log: EventLog,
        threshold: int = 2,
        grace_ms: int = 0,
    ) -> None:
        self._sink = sink
        self._log = log
        self._threshold = threshold
        self._grace_ms = grace_ms
        self.before_game = 0
        self.during_game = 0
        self.flagged = False
        self.entered_at_ms: int | None = None

    def observe(self, in_game: bool) -> None:
        if in_game:
            self.during_game += 1
        else:
            self.before_game += 1

    def enter_game(self, now_ms: int) -> None:
        """Start the in-game observation window."""
        self.entered_at_ms = now_ms

    def check(self, state: LifecycleState, now_ms: int) -> bool:
        if (
            self.flagged
            or state is not S.IN_GAME
            or self.entered_at_ms is None
            or now_ms - self.entered_at_ms < self._grace_ms
            or self.during_game > 0
            or self.before_game < self._threshold
        ):
            return False
        self.flagged = True
        self._log.count_error()
        self._sink.record(
            f"onDemandChange bug detected: Fired {self.before_game}x before game, "
            "0x during gameplay",
            EventCategory.ERROR,
            ErrorKind.UNEXPECTED_HOOK_CADENCE,
        )
        return True

    def reset(self) -> None:
        """Zero the counts and re-arm the flag; the entry time is kept."""
        self.before_game = 0
        self.during_game = 0
        self.flagged = False
