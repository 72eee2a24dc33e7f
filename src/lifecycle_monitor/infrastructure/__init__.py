"""
Infrastructure layer for the lifecycle monitor.

Contains adapters for external concerns (persistence, host, context probe,
configuration).
"""

from lifecycle_monitor.infrastructure.config import config_from_dict, load_config
from lifecycle_monitor.infrastructure.host import InProcessHost
from lifecycle_monitor.infrastructure.persistence import (
    FilesystemSnapshotStore,
    InMemorySnapshotStore,
)
from lifecycle_monitor.infrastructure.probe import (
    SelectorContextProbe,
    StaticContextProbe,
)

__all__ = [
    # Persistence
    "InMemorySnapshotStore",
    "FilesystemSnapshotStore",
    # Host
    "InProcessHost",
    # Context probes
    "SelectorContextProbe",
    "StaticContextProbe",
    # Configuration
    "config_from_dict",
    "load_config",
]
