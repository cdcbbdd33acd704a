"""
Cancellable animation sequencer.

Plays ordered beats (a content mutation followed by a delay) as a coroutine
that suspends only at delay boundaries. The epoch token is checked before
every apply and on both sides of every delay; on mismatch the run stops
without applying anything further and without raising.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional, Sequence, Union

from ..logging.config import get_animation_logger
from .epoch import AnimationEpoch, EpochToken

logger = get_animation_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


def _noop() -> None:
    return None


@dataclass(frozen=True)
class Beat:
    """One unit of a scripted sequence."""
    apply: Callable[[], None]
    delay_ms: float = 0

    @classmethod
    def pause(cls, delay_ms: float) -> "Beat":
        """A beat that only waits."""
        return cls(apply=_noop, delay_ms=delay_ms)


Phase = Union[Sequence[Beat], Callable[[], Iterable[Beat]]]


class AnimationSequencer:
    """Runs beats under an epoch token; exposes no cancel method of its own."""

    def __init__(
        self,
        epoch: AnimationEpoch,
        reduced_motion: bool = False,
        reduced_motion_factor: float = 0.3,
        sleep: Optional[SleepFunc] = None
    ) -> None:
        if not 0 < reduced_motion_factor < 1:
            raise ValueError("reduced_motion_factor must be in (0, 1)")
        self.epoch = epoch
        self.reduced_motion = reduced_motion
        self.reduced_motion_factor = reduced_motion_factor
        self._sleep = sleep or asyncio.sleep
        self.logger = logger

    def scale(self, delay_ms: float) -> float:
        """Apply reduced-motion pacing to a delay."""
        if self.reduced_motion:
            return delay_ms * self.reduced_motion_factor
        return delay_ms

    async def run(self, beats: Iterable[Beat], token: Optional[EpochToken] = None) -> bool:
        """
        Play beats in order.

        Args:
            beats: Ordered beats to play
            token: Validity token; captured from the epoch when omitted.
                Nested phases must pass the outer token.

        Returns:
            True if every beat ran, False if the run was cancelled
        """
        if token is None:
            token = self.epoch.token()

        for index, beat in enumerate(beats):
            if not token.is_valid():
                return self._cancelled(token, index)

            beat.apply()

            if beat.delay_ms > 0:
                if not token.is_valid():
                    return self._cancelled(token, index + 1)
                await self._sleep(self.scale(beat.delay_ms) / 1000.0)
                if not token.is_valid():
                    return self._cancelled(token, index + 1)

        return token.is_valid()

    async def run_phases(
        self,
        phases: Iterable[Phase],
        token: Optional[EpochToken] = None,
        on_complete: Optional[Callable[[], None]] = None
    ) -> bool:
        """
        Play several phases under one token.

        A phase is either a beat sequence or a zero-argument callable that
        builds one when the phase starts. ``on_complete`` runs exactly once,
        only if every phase finished and the token is still valid.
        """
        if token is None:
            token = self.epoch.token()

        for phase in phases:
            beats = phase() if callable(phase) else phase
            if not await self.run(beats, token):
                return False

        if not token.is_valid():
            return self._cancelled(token, None)

        if on_complete is not None:
            on_complete()
        return True

    def _cancelled(self, token: EpochToken, beat_index: Optional[int]) -> bool:
        self.logger.debug(
            "Animation run superseded",
            run_epoch=token.value,
            live_epoch=self.epoch.value,
            beat_index=beat_index
        )
        return False
