"""
Recovery strategy classifications for error handling.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class CollaboratorUnavailableError(GracefulDegradationError):
    """An external collaborator (mini-game, bonus effect, surface) is missing."""

    def __init__(self, message: str, collaborator: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.collaborator = collaborator
