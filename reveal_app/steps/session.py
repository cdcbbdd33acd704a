"""
Mini-game session ownership.

The session wraps the opaque mini-game collaborator and owns the per-second
HUD countdown timer. The timer is independent of the animation epoch, so it
has to be stopped explicitly when the game step is abandoned; ``stop`` does
that and also stops the game itself.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from ..collaborators import GameCompleteCallback, MiniGame
from ..errors import CollaboratorUnavailableError
from .views import GAME_CANVAS, Surface

logger = structlog.get_logger(__name__)


class GameSession:
    """One play-through of the mini-game."""

    def __init__(
        self,
        game: Optional[MiniGame],
        surface: Surface,
        duration_s: int,
        on_finish: GameCompleteCallback,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ) -> None:
        if game is None:
            raise CollaboratorUnavailableError(
                "No mini-game collaborator configured",
                collaborator="mini_game",
                degraded_functionality="game_step",
                fallback_strategy="skip_only"
            )
        if not surface.has(GAME_CANVAS):
            raise CollaboratorUnavailableError(
                "Surface has no game canvas",
                collaborator="game_canvas",
                degraded_functionality="game_step",
                fallback_strategy="skip_only"
            )

        self.game = game
        self.surface = surface
        self.duration_s = duration_s
        self.time_left = duration_s
        self._on_finish = on_finish
        self._sleep = sleep or asyncio.sleep
        self._timer: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Initialize and start the game and its HUD timer. Needs a running event loop."""
        if self._running:
            return
        loop = asyncio.get_running_loop()

        self.game.init(self.surface, self._complete)
        self._running = True
        self.time_left = self.duration_s
        self._update_hud()
        self._timer = loop.create_task(self._tick())
        self.game.start()

        logger.info("Game session started", duration_s=self.duration_s)

    def stop(self) -> None:
        """Stop the game and release the timer; no-op if not running."""
        if not self._running:
            return
        self._halt()
        self.game.stop()
        logger.info("Game session stopped", time_left=self.time_left)

    def _complete(self, won: bool, score: int) -> None:
        if not self._running:
            logger.debug("Ignoring completion of a stopped game session", won=won, score=score)
            return
        self._halt()
        logger.info("Game session completed", won=won, score=score)
        self._on_finish(won, score)

    def _halt(self) -> None:
        self._running = False
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _tick(self) -> None:
        while self._running and self.time_left > 0:
            await self._sleep(1.0)
            if not self._running:
                return
            self.time_left -= 1
            self._update_hud()

    def _update_hud(self) -> None:
        view = self.surface.view
        if view is not None and view.name == "game":
            view.flags["time_left"] = self.time_left
