"""
Persisted, observable application-state store.

This module owns the single writable ApplicationState record: merge-and-notify
updates, subscriber management, session persistence and reset.
"""

from collections import deque
from typing import Any, Callable, Mapping, Optional

from ..errors import SnapshotDecodeError, StorageUnavailableError
from ..logging.config import get_state_logger
from .models import DEFAULT_STATE, ApplicationState, state_from_snapshot
from .snapshot import decode_snapshot, encode_snapshot
from .storage import MemorySessionStorage, SessionStorage

STORAGE_KEY = "reveal_app_state"

Listener = Callable[[ApplicationState, ApplicationState], None]

logger = get_state_logger(__name__)


class PersistedStore:
    """
    Single source of truth for application state.

    Notifications are delivered synchronously in subscription order. A ``set``
    issued from inside a listener is queued and delivered after the current
    notification round, so every listener sees every update exactly once and
    always with the fully merged state.
    """

    def __init__(
        self,
        storage: Optional[SessionStorage] = None,
        storage_key: str = STORAGE_KEY,
        defaults: ApplicationState = DEFAULT_STATE
    ) -> None:
        self.logger = logger
        self.storage = storage if storage is not None else MemorySessionStorage()
        self.storage_key = storage_key
        self.defaults = defaults
        self._state = defaults
        self._listeners: dict[Listener, None] = {}
        self._pending: deque[tuple[ApplicationState, ApplicationState]] = deque()
        self._notifying = False

        self._load()

    def get(self) -> ApplicationState:
        """Return an independent copy of the current state."""
        return self._state.merged({})

    def set(self, partial: Optional[Mapping[str, Any]] = None, **changes: Any) -> None:
        """
        Merge fields into the state, persist it and notify subscribers.

        Args:
            partial: Mapping of field name to new value
            **changes: Additional field overrides, applied after ``partial``

        Raises:
            TypeError: If a field name is not part of ApplicationState
        """
        updates = dict(partial or {})
        updates.update(changes)

        previous = self._state
        self._state = previous.merged(updates)
        self._save()
        self._notify(self._state, previous)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; the returned callable removes exactly that listener."""
        self._listeners[listener] = None

        def unsubscribe() -> None:
            self._listeners.pop(listener, None)

        return unsubscribe

    def reset(self) -> None:
        """Clear storage, reinstate defaults and notify with the pre-reset state."""
        try:
            self.storage.remove_item(self.storage_key)
        except StorageUnavailableError as e:
            self.logger.warning(
                "Could not clear state from storage",
                storage_key=self.storage_key,
                error=str(e)
            )

        previous = self._state
        self._state = self.defaults
        self.logger.info(
            "State reset to defaults",
            previous_step=previous.current_step,
            previous_not_now_path=previous.not_now_path
        )
        self._notify(self._state, previous)

    def next_step(self) -> None:
        """Advance one step; no-op at the last step."""
        state = self._state
        if state.current_step < state.total_steps - 1:
            self.set(current_step=state.current_step + 1)

    def go_to_step(self, step: int) -> None:
        """Jump to a step; out-of-range targets are ignored."""
        if 0 <= step < self._state.total_steps:
            self.set(current_step=int(step))

    def enter_not_now_path(self) -> None:
        """Switch every render to the not-now view."""
        self.set(not_now_path=True)

    def exit_not_now_path(self, continue_flow: bool = False) -> None:
        """Leave the not-now view, back to the quiz if continuing, else to the start."""
        self.set(
            not_now_path=False,
            current_step=2 if continue_flow else 0
        )

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def _notify(self, current: ApplicationState, previous: ApplicationState) -> None:
        self._pending.append((current, previous))
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending:
                current, previous = self._pending.popleft()
                for listener in list(self._listeners):
                    listener(current, previous)
        except Exception:
            self._pending.clear()
            raise
        finally:
            self._notifying = False

    def _save(self) -> None:
        try:
            self.storage.set_item(self.storage_key, encode_snapshot(self._state))
        except StorageUnavailableError as e:
            self.logger.warning(
                "Could not save state to storage",
                storage_key=self.storage_key,
                error=str(e)
            )

    def _load(self) -> None:
        try:
            raw = self.storage.get_item(self.storage_key)
        except StorageUnavailableError as e:
            self.logger.warning(
                "Could not load state from storage",
                storage_key=self.storage_key,
                error=str(e)
            )
            return

        if raw is None:
            return

        try:
            data = decode_snapshot(raw)
        except SnapshotDecodeError as e:
            self.logger.debug(
                "Discarding malformed state snapshot",
                storage_key=self.storage_key,
                error=str(e)
            )
            return

        self._state = state_from_snapshot(data, self.defaults)
        self.logger.info(
            "Resumed state from storage",
            current_step=self._state.current_step,
            not_now_path=self._state.not_now_path
        )
