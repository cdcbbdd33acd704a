"""
Utility functions for the reveal narrative engine.
"""

from .time import Cooldown, monotonic_ms

__all__ = ["Cooldown", "monotonic_ms"]
