"""
Pending-action correlation.

Tracks at most one outstanding user intent per kind and matches it against
the host's asynchronous completion events.
"""

from collections.abc import Callable

from lifecycle_monitor.domain.event_log import EventLog
from lifecycle_monitor.domain.interfaces import EventSinkInterface
from lifecycle_monitor.domain.models import (
    ErrorKind,
    EventCategory,
    HostContext,
    IntentKind,
    LifecycleState,
    PendingAction,
    Resolution,
)


class PendingActionCorrelator:
    """
    Last-intent-wins correlator.

    A new intent of the same kind replaces the old one. Resolution always
    clears the pending intent, matched or not.
    """

    def __init__(
        self,
        sink: EventSinkInterface,
        log: EventLog,
        clock_ms: Callable[[], int],
        ttl_ms: int | None = None,
    ) -> None:
        self._sink = sink
        self._log = log
        self._clock_ms = clock_ms
        self._ttl_ms = ttl_ms
        self._pending: dict[IntentKind, PendingAction] = {}

    def pending(self, kind: IntentKind) -> PendingAction | None:
        return self._pending.get(kind)

    def all_pending(self) -> tuple[PendingAction, ...]:
        return tuple(self._pending.values())

    def record_intent(
        self,
        kind: IntentKind,
        target: str,
        context: HostContext,
        state: LifecycleState = LifecycleState.UNINITIALIZED,
    ) -> PendingAction:
        """Track a new intent, superseding any pending one of the same kind."""
        action = PendingAction(
            kind=kind,
            target=target,
            issued_at_ms=self._clock_ms(),
            origin_context=context,
            origin_state=state,
        )
        self._pending[kind] = action
        return action

    def cancel(self, kind: IntentKind) -> PendingAction | None:
        """Drop the pending intent of ``kind`` without resolving it."""
        return self._pending.pop(kind, None)

    def resolve(self, kind: IntentKind, target: str) -> Resolution:
        """
        Match a completion against the pending intent of ``kind``.

        Returns:
            Resolution; ``pending`` is False when nothing was tracked
        """
        action = self._pending.pop(kind, None)
        now = self._clock_ms()

        if action is not None and self._ttl_ms is not None:
            age = now - action.issued_at_ms
            if age > self._ttl_ms:
                self._sink.record(
                    f'Pending {kind.value} "{action.target}" expired after {age}ms',
                    EventCategory.INFO,
                )
                action = None

        if action is None:
            self._sink.record(
                f'{kind.value.capitalize()} completed: "{target}" (no tracked request)',
                EventCategory.INFO,
            )
            return Resolution(matched=False, pending=False)

        elapsed = now - action.issued_at_ms
        if action.target == target:
            self._sink.record(
                f'{kind.value.capitalize()} completed: "{target}" '
                f"({elapsed}ms from {action.origin_context.value})",
                EventCategory.SUCCESS,
            )
            return Resolution(matched=True, elapsed_ms=elapsed, origin=action)

        self._log.count_error()
        self._sink.record(
            f'{kind.value.capitalize()} mismatch: expected "{action.target}", '
            f'got "{target}"',
            EventCategory.ERROR,
            ErrorKind.CORRELATION_MISMATCH,
        )
        return Resolution(matched=False, elapsed_ms=elapsed, origin=action)
