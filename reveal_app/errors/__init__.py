"""
Error classification for the reveal narrative engine.

None of these errors reach the user as an error message: storage and
snapshot failures degrade to in-memory state or defaults, and missing
collaborators degrade the feature that depends on them.
"""

from .data_quality import (
    DataQualityError,
    SnapshotDecodeError,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    StorageUnavailableError,
)
from .recovery import (
    GracefulDegradationError,
    CollaboratorUnavailableError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "SnapshotDecodeError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "StorageUnavailableError",
    # Recovery Categories
    "GracefulDegradationError",
    "CollaboratorUnavailableError",
]
