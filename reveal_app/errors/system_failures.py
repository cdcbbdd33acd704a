"""
System failure classifications for the storage layer.

The store catches these at its boundary: a failing backend leaves the
application running with in-memory state only.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for infrastructure failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Session storage read, write or clear failure."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target


class StorageUnavailableError(PersistenceError):
    """The session storage backend is disabled or cannot be reached."""
