"""
Application layer for the lifecycle monitor.

Contains the monitor engine and the services that coordinate domain objects.
"""

from lifecycle_monitor.application.event_recorder import EventRecorder
from lifecycle_monitor.application.monitor import LifecycleMonitor
from lifecycle_monitor.application.readiness import RetryPolicy, wait_for_host

__all__ = [
    "EventRecorder",
    "LifecycleMonitor",
    "RetryPolicy",
    "wait_for_host",
]
