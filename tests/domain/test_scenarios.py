"""Tests for scenario classification and the recognizer."""

import pytest

from lifecycle_monitor.domain.models import (
    EventCategory,
    EventRecord,
    HostContext,
    IntentKind,
    LifecycleState,
    PendingAction,
    ScenarioKey,
    Trigger,
)
from lifecycle_monitor.domain.scenarios import (
    NEW_GAME_ACTION_MESSAGE,
    ScenarioRecognizer,
    classify_scenario,
    is_in_game_origin,
)


def user_action(message: str) -> EventRecord:
    return EventRecord(
        relative_ms=0,
        message=message,
        category=EventCategory.USER_ACTION,
        is_error=False,
        state=LifecycleState.API_READY,
        context=HostContext.MAIN_MENU,
    )


def load_intent(
    target: str,
    context: HostContext,
    state: LifecycleState = LifecycleState.API_READY,
) -> PendingAction:
    return PendingAction(
        kind=IntentKind.LOAD,
        target=target,
        issued_at_ms=0,
        origin_context=context,
        origin_state=state,
    )


NEW_GAME_WINDOW = (user_action(NEW_GAME_ACTION_MESSAGE),)


class TestIsInGameOrigin:
    """Tests for origin classification."""

    @pytest.mark.parametrize(
        ("context", "expected"),
        [
            (HostContext.IN_GAME, True),
            (HostContext.IN_GAME_MENU, True),
            (HostContext.MAIN_MENU, False),
            (HostContext.LOAD_SAVE_SCREEN, False),
        ],
    )
    def test_known_context_decides(self, context, expected):
        """A known origin context decides on its own."""
        assert is_in_game_origin(load_intent("A", context)) is expected

    def test_unknown_context_falls_back_to_state(self):
        """With no context, only the in-game state counts as in game."""
        unknown = HostContext.UNKNOWN

        assert is_in_game_origin(load_intent("A", unknown, LifecycleState.IN_GAME))
        assert not is_in_game_origin(load_intent("A", unknown, LifecycleState.MENU))


class TestClassifyScenario:
    """Tests for classify_scenario()."""

    @pytest.mark.parametrize("trigger", [Trigger.GAME_INIT, Trigger.MAP_READY])
    def test_new_game_from_menu(self, trigger):
        """New-game click in the window with no save name."""
        assert (
            classify_scenario(trigger, NEW_GAME_WINDOW, current_save=None)
            is ScenarioKey.NEW_GAME_FROM_MENU
        )

    def test_new_game_requires_click(self):
        """Without the click nothing is classified."""
        window = (user_action('User clicked: Load "A" (from main_menu)'),)

        assert classify_scenario(Trigger.GAME_INIT, window, current_save=None) is None

    def test_new_game_requires_no_save(self):
        """A tracked save name rules out a new game."""
        assert classify_scenario(Trigger.MAP_READY, NEW_GAME_WINDOW, "CityA") is None

    def test_load_from_menu(self):
        """Resolved load whose intent came from a menu."""
        origin = load_intent("CityA", HostContext.MAIN_MENU)

        key = classify_scenario(
            Trigger.LOAD_RESOLVED, (), "CityA", previous_save=None, origin=origin
        )

        assert key is ScenarioKey.LOAD_SAVE_FROM_MENU

    def test_reload_same_save(self):
        """In-game load of the save already loaded."""
        origin = load_intent("CityA", HostContext.IN_GAME, LifecycleState.IN_GAME)

        key = classify_scenario(
            Trigger.LOAD_RESOLVED, (), "CityA", previous_save="CityA", origin=origin
        )

        assert key is ScenarioKey.GAME_RELOAD_SAME_SAVE

    def test_load_different_save(self):
        """In-game load of another save."""
        origin = load_intent("CityB", HostContext.IN_GAME_MENU)

        key = classify_scenario(
            Trigger.LOAD_RESOLVED, (), "CityB", previous_save="CityA", origin=origin
        )

        assert key is ScenarioKey.GAME_LOAD_DIFFERENT_SAVE

    def test_in_game_load_without_previous_is_different(self):
        """No previous save cannot be a reload of the same one."""
        origin = load_intent("CityA", HostContext.IN_GAME)

        key = classify_scenario(
            Trigger.LOAD_RESOLVED, (), "CityA", previous_save=None, origin=origin
        )

        assert key is ScenarioKey.GAME_LOAD_DIFFERENT_SAVE

    def test_load_resolved_without_origin(self):
        """An untracked completion evidences nothing."""
        assert classify_scenario(Trigger.LOAD_RESOLVED, (), "CityA", "CityA") is None


class TestScenarioRecognizer:
    """Tests for ScenarioRecognizer."""

    def test_all_scenarios_start_undetected(self):
        """Every scenario is listed and undetected initially."""
        recognizer = ScenarioRecognizer()

        records = recognizer.records()

        assert {r.key for r in records} == set(ScenarioKey)
        assert not any(r.detected for r in records)

    def test_flags_are_monotonic(self):
        """Once detected a scenario stays detected."""
        recognizer = ScenarioRecognizer()
        recognizer.observe(Trigger.GAME_INIT, NEW_GAME_WINDOW, None)

        recognizer.observe(Trigger.GAME_INIT, (), "CityA")

        assert recognizer.is_detected(ScenarioKey.NEW_GAME_FROM_MENU)

    def test_observe_sets_exactly_one(self):
        """A single trigger marks at most one scenario."""
        recognizer = ScenarioRecognizer()
        origin = load_intent("CityA", HostContext.MAIN_MENU)

        key = recognizer.observe(
            Trigger.LOAD_RESOLVED, NEW_GAME_WINDOW, "CityA", None, origin
        )

        assert key is ScenarioKey.LOAD_SAVE_FROM_MENU
        assert [r.key for r in recognizer.records() if r.detected] == [key]

    def test_clear_resets_flags(self):
        """clear() is the only way back to undetected."""
        recognizer = ScenarioRecognizer()
        recognizer.observe(Trigger.MAP_READY, NEW_GAME_WINDOW, None)

        recognizer.clear()

        assert not recognizer.is_detected(ScenarioKey.NEW_GAME_FROM_MENU)
