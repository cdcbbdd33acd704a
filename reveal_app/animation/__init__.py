"""
Animation module.

Epoch-based cooperative cancellation and the beat sequencer that plays the
intro and analysis animations.
"""

from .epoch import AnimationEpoch, EpochToken
from .sequencer import AnimationSequencer, Beat

__all__ = ["AnimationEpoch", "AnimationSequencer", "Beat", "EpochToken"]
