"""
Context probe adapters.

Both probes are push-based: subscribers are notified whenever the detected
context changes. Detection failures degrade to UNKNOWN.
"""

import logging
from collections.abc import Callable

from lifecycle_monitor.domain.interfaces import ContextProbeInterface, Unsubscribe
from lifecycle_monitor.domain.models import HostContext

logger = logging.getLogger(__name__)

# First matching selector wins
DEFAULT_SELECTOR_RULES: tuple[tuple[str, HostContext], ...] = (
    ("main.grid.gap-8.min-h-screen", HostContext.LOAD_SAVE_SCREEN),
    ("main.justify-center", HostContext.MAIN_MENU),
    ('div[data-mod-id="escape-menu"]', HostContext.IN_GAME_MENU),
    ('div[data-mod-id="top-bar"]', HostContext.IN_GAME),
)


class _NotifyingProbe(ContextProbeInterface):
    """Shared subscriber bookkeeping."""

    def __init__(self, initial: HostContext = HostContext.UNKNOWN) -> None:
        self._context = initial
        self._subscribers: list[Callable[[HostContext], None]] = []

    def current_context(self) -> HostContext:
        return self._context

    def subscribe(self, callback: Callable[[HostContext], None]) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _update(self, context: HostContext) -> bool:
        if context is self._context:
            return False
        self._context = context
        for callback in list(self._subscribers):
            callback(context)
        return True


class StaticContextProbe(_NotifyingProbe):
    """Probe whose context is pushed explicitly by the caller."""

    def set_context(self, context: HostContext) -> bool:
        """Set the context; returns True if it changed."""
        return self._update(context)


class SelectorContextProbe(_NotifyingProbe):
    """
    Detects the context from selector presence on the presentation surface.

    ``query`` answers whether a selector currently matches. Call ``refresh``
    from whatever change notification the surface offers (structural
    observation, a timer, native events).
    """

    def __init__(
        self,
        query: Callable[[str], bool],
        rules: tuple[tuple[str, HostContext], ...] = DEFAULT_SELECTOR_RULES,
    ) -> None:
        super().__init__()
        self._query = query
        self._rules = rules
        self._context = self.detect()

    def detect(self) -> HostContext:
        """Evaluate the rules once without notifying subscribers."""
        try:
            for selector, context in self._rules:
                if self._query(selector):
                    return context
        except Exception as e:
            logger.debug("Context probe failed, treating as unknown: %s", e)
        return HostContext.UNKNOWN

    def refresh(self) -> HostContext:
        """Re-evaluate and notify subscribers if the context changed."""
        self._update(self.detect())
        return self._context
