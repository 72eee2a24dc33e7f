"""Host readiness: await the hook API once, with bounded backoff."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from lifecycle_monitor.domain.exceptions import HostUnavailable
from lifecycle_monitor.domain.interfaces import HostHooksInterface
from lifecycle_monitor.domain.models import MonitorConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff."""

    attempts: int = 50
    initial_delay: float = 0.01
    backoff: float = 2.0
    max_delay: float = 1.0

    @classmethod
    def from_config(cls, config: MonitorConfig) -> "RetryPolicy":
        return cls(
            attempts=config.ready_attempts,
            initial_delay=config.ready_initial_delay,
            backoff=config.ready_backoff,
            max_delay=config.ready_max_delay,
        )

    def delays(self) -> list[float]:
        """Sleep durations between consecutive attempts."""
        result = []
        delay = self.initial_delay
        for _ in range(self.attempts - 1):
            result.append(min(delay, self.max_delay))
            delay *= self.backoff
        return result


async def wait_for_host(
    resolve: Callable[[], HostHooksInterface | None],
    policy: RetryPolicy | None = None,
) -> HostHooksInterface:
    """
    Poll ``resolve`` until it returns the host hook API.

    Args:
        resolve: Returns the hook API, or None while the host is not ready
        policy: Retry policy (defaults to RetryPolicy())

    Returns:
        The host hook API

    Raises:
        HostUnavailable: If every attempt returned None
    """
    policy = policy or RetryPolicy()
    delays = policy.delays()
    for attempt in range(1, policy.attempts + 1):
        hooks = resolve()
        if hooks is not None:
            logger.debug("Host hook API available after %d attempt(s)", attempt)
            return hooks
        if attempt <= len(delays):
            await asyncio.sleep(delays[attempt - 1])
    raise HostUnavailable(policy.attempts)
