"""
Lifecycle state machine.

Holds the current LifecycleState and validates every change against a fixed
TransitionTable. The only exception is the bootstrap step out of
UNINITIALIZED, which is always accepted.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.interfaces import EventSinkInterface
from lifecycle_monitor.domain.models import ErrorKind, EventCategory, LifecycleState

S = LifecycleState

# States allowed to have no outgoing edge
TERMINAL_LIKE_STATES = frozenset({S.IN_GAME, S.MENU})


class TransitionTable:
    """Immutable mapping from each state to its allowed successors."""

    def __init__(self, edges: Mapping[LifecycleState, Iterable[LifecycleState]]):
        frozen = {state: frozenset(edges.get(state, ())) for state in LifecycleState}
        dead_ends = [
            state.value
            for state, successors in frozen.items()
            if not successors and state not in TERMINAL_LIKE_STATES
        ]
        if dead_ends:
            raise ValueError(f"States without outgoing transitions: {dead_ends}")
        self._edges: MappingProxyType[LifecycleState, frozenset[LifecycleState]] = (
            MappingProxyType(frozen)
        )

    def successors(self, state: LifecycleState) -> frozenset[LifecycleState]:
        return self._edges[state]

    def allows(self, source: LifecycleState, target: LifecycleState) -> bool:
        return target in self._edges[source]

    def as_dict(self) -> dict[str, list[str]]:
        return {
            src.value: sorted(dst.value for dst in dsts)
            for src, dsts in self._edges.items()
        }


DEFAULT_TRANSITIONS = TransitionTable(
    {
        S.UNINITIALIZED: {S.API_READY},
        S.API_READY: {
            S.USER_STARTING_NEW_GAME,
            S.USER_LOADING_SAVE,
            S.CITY_LOADING,
            S.GAME_INIT,
        },
        S.USER_STARTING_NEW_GAME: {S.CITY_LOADING, S.GAME_INIT},
        S.USER_LOADING_SAVE: {S.CITY_LOADING, S.GAME_INIT},
        S.CITY_LOADING: {S.GAME_INIT, S.IN_GAME},
        S.GAME_INIT: {S.IN_GAME},
        S.IN_GAME: {
            S.MENU,
            S.CITY_LOADING,
            S.USER_LOADING_SAVE,
            S.USER_STARTING_NEW_GAME,
        },
        S.MENU: {
            S.CITY_LOADING,
            S.GAME_INIT,
            S.USER_STARTING_NEW_GAME,
            S.USER_LOADING_SAVE,
        },
    }
)


class LifecycleStateMachine:
    """
    Validates and applies lifecycle transitions.

    Side effects are limited to the event log (one record per call) and its
    two counters. A rejected transition is final for that call.
    """

    def __init__(
        self,
        sink: EventSinkInterface,
        log: EventLog,
        table: TransitionTable = DEFAULT_TRANSITIONS,
    ) -> None:
        self._sink = sink
        self._log = log
        self._table = table
        self.current_state = LifecycleState.UNINITIALIZED

    @property
    def table(self) -> TransitionTable:
        return self._table

    def can_transition(self, new_state: LifecycleState) -> bool:
        """True if ``transition(new_state)`` would be accepted."""
        if self.current_state is LifecycleState.UNINITIALIZED:
            return True
        return self._table.allows(self.current_state, new_state)

    def transition(self, new_state: LifecycleState) -> bool:
        """
        Attempt to move to ``new_state``.

        Returns:
            True if accepted, False if the table forbids it
        """
        old_state = self.current_state
        if not self.can_transition(new_state):
            self._log.count_error()
            self._sink.record(
                f"Invalid transition: {old_state.value} → {new_state.value}",
                EventCategory.ERROR,
                ErrorKind.INVALID_TRANSITION,
            )
            return False

        self.current_state = new_state
        self._log.count_valid_transition()
        self._sink.record(
            f"State: {old_state.value} → {new_state.value}",
            EventCategory.TRANSITION,
        )
        return True
