"""
Application state module.

Holds the single ApplicationState record, its session persistence and the
observable store every other component reads from.
"""

from .models import DEFAULT_STATE, ApplicationState, FinalChoice, Step
from .storage import FileSessionStorage, MemorySessionStorage, UnavailableStorage
from .store import PersistedStore

__all__ = [
    "DEFAULT_STATE",
    "ApplicationState",
    "FileSessionStorage",
    "FinalChoice",
    "MemorySessionStorage",
    "PersistedStore",
    "Step",
    "UnavailableStorage",
]
