"""
Application state data models.

This module defines the single immutable application-state record, the step
sequence and the final-choice enumeration, plus the merge rules used when a
persisted snapshot is loaded over the defaults.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum, IntEnum
from typing import Any, Mapping

import structlog

logger = structlog.get_logger(__name__)


class Step(IntEnum):
    """Fixed step sequence."""
    INTRO = 0
    QUESTION = 1
    QUIZ = 2
    TERMS = 3
    GAME = 4
    AI_ANALYSIS = 5
    FINAL = 6


TOTAL_STEPS = len(Step)


class FinalChoice(str, Enum):
    """Answer given on the final step."""
    NONE = "none"
    YES = "yes"
    DIFFERENT_DAY = "different-day"


@dataclass(frozen=True)
class ApplicationState:
    """Complete application state. Every field always has a value."""

    current_step: int = 0
    total_steps: int = TOTAL_STEPS

    # Intro
    countdown_complete: bool = False

    # Question
    no_attempts: int = 0
    escape_hatch_visible: bool = False

    # Quiz
    quiz_current_question: int = 0
    quiz_answers: tuple[int, ...] = ()
    quiz_complete: bool = False

    # Terms
    terms_scrolled: bool = False
    terms_decline_attempts: int = 0

    # Game
    game_complete: bool = False
    game_score: int = 0

    # AI analysis
    ai_complete: bool = False

    # Final
    final_choice: FinalChoice = FinalChoice.NONE

    # Overrides step dispatch entirely
    not_now_path: bool = False

    def merged(self, updates: Mapping[str, Any]) -> "ApplicationState":
        """Return a copy with ``updates`` overwriting fields; unknown names raise TypeError."""
        changes = dict(updates)
        if "quiz_answers" in changes:
            changes["quiz_answers"] = tuple(changes["quiz_answers"])
        if "final_choice" in changes:
            changes["final_choice"] = FinalChoice(changes["final_choice"])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form used by the snapshot codec."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, Enum):
                value = value.value
            data[f.name] = value
        return data

    @property
    def step(self) -> Step:
        return Step(self.current_step)


DEFAULT_STATE = ApplicationState()


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Coerce one stored value to the type of its default; raise on mismatch."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
    elif isinstance(default, FinalChoice):
        if value is None:
            return FinalChoice.NONE
        return FinalChoice(value)
    elif isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
    elif isinstance(default, tuple):
        if isinstance(value, (list, tuple)) and all(
            isinstance(item, int) and not isinstance(item, bool) for item in value
        ):
            return tuple(value)
    raise ValueError(f"Stored value for {name} has unexpected type: {value!r}")


def state_from_snapshot(data: Mapping[str, Any],
                        defaults: ApplicationState = DEFAULT_STATE) -> ApplicationState:
    """
    Merge a decoded snapshot over the defaults.

    Missing fields keep their defaults, unknown fields are dropped, and a
    field whose stored value has the wrong type falls back to its default.
    ``total_steps`` is a constant and is never taken from storage.

    Args:
        data: Decoded snapshot mapping
        defaults: State to merge over

    Returns:
        Fully defined ApplicationState
    """
    changes: dict[str, Any] = {}

    for f in fields(defaults):
        if f.name not in data or f.name == "total_steps":
            continue
        default = getattr(defaults, f.name)
        try:
            changes[f.name] = _coerce(f.name, data[f.name], default)
        except ValueError:
            logger.debug(
                "Ignoring malformed snapshot field",
                field=f.name,
                stored_value=repr(data[f.name])
            )

    step = changes.get("current_step")
    if step is not None and not 0 <= step < defaults.total_steps:
        logger.debug("Ignoring out-of-range snapshot step", stored_step=step)
        del changes["current_step"]

    return replace(defaults, **changes)
