"""
Domain exceptions for the lifecycle monitor.

None of these escape a host reaction: the monitor records or logs them and
carries on. They exist so adapters can signal failures precisely.
"""

from typing import Any


class HostSignalError(Exception):
    """
    Raised when a host payload cannot be turned into a HostSignal.

    This is the ingestion-boundary rejection for malformed or unknown
    signals.
    """

    def __init__(self, message: str, payload: Any = None):
        """
        Args:
            message: Human-readable description of the problem
            payload: The offending payload, if available
        """
        super().__init__(message)
        self.payload = payload


class PersistenceError(Exception):
    """Raised by snapshot stores when reading or writing the log fails."""

    def __init__(self, message: str, storage_key: str | None = None):
        super().__init__(message)
        self.storage_key = storage_key


class ConfigurationError(Exception):
    """Raised when configuration files are invalid or missing."""

    pass


class HostUnavailable(Exception):
    """
    Raised when the host hook API never becomes available.

    The readiness wait gives up after its bounded number of attempts.
    """

    def __init__(self, attempts: int):
        super().__init__(f"Host hook API unavailable after {attempts} attempts")
        self.attempts = attempts
