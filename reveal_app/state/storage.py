"""Session-scoped storage backends for the persisted state snapshot."""

import threading
from pathlib import Path
from typing import Optional, Protocol

from ..errors import StorageUnavailableError


class SessionStorage(Protocol):
    """Key/value storage scoped to one session."""

    def get_item(self, key: str) -> Optional[bytes]:
        ...

    def set_item(self, key: str, value: bytes) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemorySessionStorage:
    """Process-scoped storage; lives as long as the owning session object."""

    def __init__(self) -> None:
        self._items: dict[str, bytes] = {}

    def get_item(self, key: str) -> Optional[bytes]:
        return self._items.get(key)

    def set_item(self, key: str, value: bytes) -> None:
        self._items[key] = bytes(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class FileSessionStorage:
    """
    Storage backed by one file per key inside a session directory.

    Survives a process restart, so a reloaded app resumes where the previous
    one stopped. Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, session_dir: str | Path):
        self.session_dir = Path(session_dir)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.session_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot read session storage: {e}",
                operation="read",
                target=str(path)
            ) from e

    def set_item(self, key: str, value: bytes) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        with self._lock:
            try:
                self.session_dir.mkdir(parents=True, exist_ok=True)
                tmp_path.write_bytes(value)
                tmp_path.replace(path)
            except OSError as e:
                raise StorageUnavailableError(
                    f"Cannot write session storage: {e}",
                    operation="write",
                    target=str(path)
                ) from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageUnavailableError(
                    f"Cannot clear session storage: {e}",
                    operation="remove",
                    target=str(path)
                ) from e


class UnavailableStorage:
    """Backend that is switched off; every operation fails."""

    def get_item(self, key: str) -> Optional[bytes]:
        raise StorageUnavailableError("Session storage is disabled", operation="read", target=key)

    def set_item(self, key: str, value: bytes) -> None:
        raise StorageUnavailableError("Session storage is disabled", operation="write", target=key)

    def remove_item(self, key: str) -> None:
        raise StorageUnavailableError("Session storage is disabled", operation="remove", target=key)
