"""
Data quality errors for persisted state snapshots.

A malformed snapshot is treated exactly like a missing one: the store
falls back to defaults.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data issues that are handled by falling back to defaults."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class SnapshotDecodeError(DataQualityError):
    """Persisted snapshot exists but cannot be decoded into a state record."""

    def __init__(self, message: str, raw_data: Optional[bytes] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
