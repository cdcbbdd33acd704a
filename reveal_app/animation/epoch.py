"""
Animation epoch: cooperative cancellation for in-flight sequences.

A run captures an EpochToken when it starts and checks it before every
visible effect. Advancing the epoch invalidates every token issued before,
which is the only way to cancel a run.
"""

from dataclasses import dataclass, field


class AnimationEpoch:
    """Monotonically increasing animation session counter."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def advance(self) -> int:
        """Invalidate every outstanding token and return the new epoch."""
        self._value += 1
        return self._value

    def token(self) -> "EpochToken":
        """Capture the current epoch for a new run."""
        return EpochToken(epoch=self, value=self._value)


@dataclass(frozen=True)
class EpochToken:
    """Validity token of one animation run and all its nested phases."""
    epoch: AnimationEpoch = field(compare=False, repr=False)
    value: int

    def is_valid(self) -> bool:
        return self.value == self.epoch.value
