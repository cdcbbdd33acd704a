"""
External collaborator interfaces.

The particle burst, mini-game, bonus effect, toast queue and clipboard live
outside the core. The core only calls the methods declared here; the simple
implementations below are what the app uses when nothing else is plugged in.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

import structlog

from .steps.views import Surface

logger = structlog.get_logger(__name__)

GameCompleteCallback = Callable[[bool, int], None]


class ParticleBurst(Protocol):
    def fire(self, x: float, y: float, count: int = 50) -> None:
        ...

    def burst(self) -> None:
        ...

    def clear(self) -> None:
        ...


class MiniGame(Protocol):
    def init(self, surface: Surface, on_complete: GameCompleteCallback) -> None:
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


class BonusEffect(Protocol):
    def init(self, surface: Surface) -> None:
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


class ToastQueue(Protocol):
    def show(self, message: str, duration_ms: Optional[int] = None) -> None:
        ...


class Clipboard(Protocol):
    def copy_to_clipboard(self, text: str) -> bool:
        ...


class NullParticleBurst:
    """Particle burst with nothing to draw on."""

    def fire(self, x: float, y: float, count: int = 50) -> None:
        logger.debug("Particle fire skipped", x=x, y=y, count=count)

    def burst(self) -> None:
        logger.debug("Particle burst skipped")

    def clear(self) -> None:
        return None


class ToastLog:
    """Toast queue that records messages and logs them."""

    def __init__(self, default_duration_ms: int = 2500) -> None:
        self.default_duration_ms = default_duration_ms
        self.messages: list[str] = []

    def show(self, message: str, duration_ms: Optional[int] = None) -> None:
        self.messages.append(message)
        logger.info("Toast", message=message, duration_ms=duration_ms or self.default_duration_ms)

    @property
    def last(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None


class MemoryClipboard:
    """Clipboard that keeps the copied text in memory."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.text: Optional[str] = None

    def copy_to_clipboard(self, text: str) -> bool:
        if not self.available:
            return False
        self.text = text
        return True


@dataclass
class Collaborators:
    """Everything outside the core the app talks to."""
    toasts: ToastQueue = field(default_factory=ToastLog)
    particles: ParticleBurst = field(default_factory=NullParticleBurst)
    clipboard: Clipboard = field(default_factory=MemoryClipboard)
    game: Optional[MiniGame] = None
    bonus_effect: Optional[BonusEffect] = None
