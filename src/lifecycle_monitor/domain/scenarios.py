"""
Scenario recognition.

Classification is a pure function of the trigger, a recent window of the
event log, the tracked save names and the origin of a resolved intent.
Rules are evaluated in a fixed priority order and the first match wins:

1. new game from menu
2. load save from menu
3. in game, reload the same save
4. in game, load a different save
"""

from collections.abc import Sequence
from dataclasses import replace

from lifecycle_monitor.domain.models import (
    SCENARIO_NAMES,
    EventCategory,
    EventRecord,
    HostContext,
    LifecycleState,
    PendingAction,
    ScenarioKey,
    ScenarioRecord,
    Trigger,
)

NEW_GAME_ACTION_MESSAGE = "User clicked: New Game"

IN_GAME_CONTEXTS = frozenset({HostContext.IN_GAME, HostContext.IN_GAME_MENU})


def is_in_game_origin(origin: PendingAction) -> bool:
    """Whether the intent was issued during play rather than from a menu."""
    if origin.origin_context is HostContext.UNKNOWN:
        return origin.origin_state is LifecycleState.IN_GAME
    return origin.origin_context in IN_GAME_CONTEXTS


def classify_scenario(
    trigger: Trigger,
    recent: Sequence[EventRecord],
    current_save: str | None,
    previous_save: str | None = None,
    origin: PendingAction | None = None,
) -> ScenarioKey | None:
    """Return the single scenario the trigger evidences, if any."""
    if trigger in (Trigger.GAME_INIT, Trigger.MAP_READY):
        clicked_new_game = any(
            e.category is EventCategory.USER_ACTION
            and e.message == NEW_GAME_ACTION_MESSAGE
            for e in recent
        )
        if clicked_new_game and current_save is None:
            return ScenarioKey.NEW_GAME_FROM_MENU

    if trigger is Trigger.LOAD_RESOLVED and origin is not None:
        if not is_in_game_origin(origin):
            return ScenarioKey.LOAD_SAVE_FROM_MENU
        if previous_save is not None and previous_save == current_save:
            return ScenarioKey.GAME_RELOAD_SAME_SAVE
        return ScenarioKey.GAME_LOAD_DIFFERENT_SAVE

    return None


class ScenarioRecognizer:
    """Holds monotonic scenario flags fed by ``classify_scenario``."""

    def __init__(self) -> None:
        self._records: dict[ScenarioKey, ScenarioRecord] = {}
        self.clear()

    def observe(
        self,
        trigger: Trigger,
        recent: Sequence[EventRecord],
        current_save: str | None,
        previous_save: str | None = None,
        origin: PendingAction | None = None,
    ) -> ScenarioKey | None:
        key = classify_scenario(trigger, recent, current_save, previous_save, origin)
        if key is not None:
            self._records[key] = replace(self._records[key], detected=True)
        return key

    def is_detected(self, key: ScenarioKey) -> bool:
        return self._records[key].detected

    def records(self) -> tuple[ScenarioRecord, ...]:
        return tuple(self._records.values())

    def clear(self) -> None:
        self._records = {
            key: ScenarioRecord(key=key, name=name)
            for key, name in SCENARIO_NAMES.items()
        }
