"""
Evasive control state machine.

The "no" control on the question step dodges every interaction attempt,
escalating its label and shrinking, until the attempt count reaches the
threshold. From then on it is disarmed: it can be actuated, it sits in its
neutral position, and the escape-hatch link is revealed once.

States (attempt_count persisted as ``no_attempts``):

    ARMED (count < threshold) --attempt--> ARMED or DISARMED
    ARMED --actuate--> treated as an attempt, never navigates
    DISARMED --actuate--> not-now path
"""

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..config.content import ContentConfig
from ..config.defaults import EvasionParams
from ..logging.config import get_state_logger
from ..utils.time import Clock, Cooldown

if TYPE_CHECKING:
    from ..collaborators import ToastQueue
    from ..state.store import PersistedStore

logger = get_state_logger(__name__)

NEUTRAL_OFFSET = (0, 0)


@dataclass(frozen=True)
class ControlAppearance:
    """What the view shows for the control."""
    label: str
    offset: tuple[int, int]
    scale: float
    actuatable: bool


class EvasiveControl:
    """Bounded escalation sequence for one interactive control."""

    def __init__(
        self,
        store: "PersistedStore",
        toasts: "ToastQueue",
        params: EvasionParams,
        content: ContentConfig,
        reduced_motion: bool = False,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None
    ) -> None:
        self.store = store
        self.toasts = toasts
        self.params = params
        self.content = content
        self.reduced_motion = reduced_motion
        self.rng = rng or random.Random()
        self.cooldown = Cooldown(params.cooldown_ms, clock)
        self.offset: tuple[int, int] = NEUTRAL_OFFSET
        self.logger = logger

    @property
    def attempt_count(self) -> int:
        return self.store.get().no_attempts

    @property
    def armed(self) -> bool:
        return self.attempt_count < self.params.threshold

    @property
    def cooldown_active(self) -> bool:
        return self.cooldown.active

    @property
    def label(self) -> str:
        labels = self.content.no_button_labels
        return labels[min(self.attempt_count, len(labels) - 1)]

    @property
    def scale(self) -> float:
        if not self.armed:
            return 1.0
        return max(self.params.min_scale, 1 - self.attempt_count * self.params.scale_step)

    def appearance(self) -> ControlAppearance:
        return ControlAppearance(
            label=self.label,
            offset=self.offset if self.armed else NEUTRAL_OFFSET,
            scale=self.scale,
            actuatable=not self.armed,
        )

    def attempt(self) -> bool:
        """
        Handle a hover, touch or click attempt on the control.

        Returns:
            True if the control dodged, False if the attempt was ignored
            (disarmed or cooling down)
        """
        if not self.armed:
            return False
        if not self.cooldown.try_acquire():
            return False

        count = self.attempt_count + 1
        if not self.reduced_motion:
            self.offset = self._next_offset()

        # Notifies subscribers, which re-render from label/offset above
        self.store.set(no_attempts=count)

        self.toasts.show(self.rng.choice(self.content.no_button_messages))

        self.logger.info(
            "Evasive control dodged",
            attempt_count=count,
            threshold=self.params.threshold,
            offset=self.offset
        )

        if count >= self.params.threshold:
            self._disarm()

        return True

    def actuate(self) -> bool:
        """
        Handle a real activation of the control.

        Returns:
            True if navigation to the not-now path happened
        """
        if self.armed:
            self.attempt()
            return False

        self.logger.info("Evasive control actuated", attempt_count=self.attempt_count)
        self.store.enter_not_now_path()
        return True

    def reset(self) -> None:
        """Drop transient state: cooldown and displacement."""
        self.cooldown.clear()
        self.offset = NEUTRAL_OFFSET

    def _disarm(self) -> None:
        self.offset = NEUTRAL_OFFSET

        if not self.store.get().escape_hatch_visible:
            self.store.set(escape_hatch_visible=True)
            self.logger.info("Escape hatch revealed", attempt_count=self.attempt_count)

        self.toasts.show(self.content.no_button_disarmed_message)

    def _next_offset(self) -> tuple[int, int]:
        candidates = [tuple(o) for o in self.params.offsets if tuple(o) != self.offset]
        return self.rng.choice(candidates)
