"""
View descriptions and the render surface.

A View is plain data describing what one step displays: text, lines that can
be revealed, actions the user can trigger, and transient presentation flags.
The Surface is the render target the dispatcher mounts views onto; every
"page write" in the narrative is a mutation of the mounted view.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..state.models import Step

GAME_CANVAS = "game_canvas"
BONUS_CANVAS = "bonus_canvas"


@dataclass
class Action:
    """A control the user can trigger on a view."""
    name: str
    label: str
    enabled: bool = True
    visible: bool = True
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ViewLine:
    """A line of text, optionally with a value column, revealed by animations."""
    text: str
    value: Optional[str] = None
    visible: bool = True


@dataclass
class View:
    """Everything one step displays."""
    name: str
    step: Optional[Step] = None
    title: str = ""
    subtitle: str = ""
    emoji: str = ""
    lines: list[ViewLine] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    content: str = ""                                # Cinematic content slot
    log: list[str] = field(default_factory=list)     # System log area
    flags: dict[str, Any] = field(default_factory=dict)

    def action(self, name: str) -> Optional[Action]:
        for action in self.actions:
            if action.name == name:
                return action
        return None

    def has_action(self, name: str) -> bool:
        """True if the action exists and is currently visible."""
        action = self.action(name)
        return action is not None and action.visible

    def offers(self, name: str) -> bool:
        """True if the user can trigger the action right now: visible and enabled."""
        action = self.action(name)
        return action is not None and action.visible and action.enabled

    def visible_lines(self) -> list[ViewLine]:
        return [line for line in self.lines if line.visible]


@dataclass
class Progress:
    """Progress bar and step indicator."""
    percent: float = 0.0
    label: str = ""


class Surface:
    """
    In-memory render target for the main content area.

    ``capabilities`` lists the drawing areas available to collaborators
    (for instance the mini-game canvas); features whose area is missing
    degrade instead of failing.
    """

    def __init__(self, capabilities: Iterable[str] = (GAME_CANVAS, BONUS_CANVAS)) -> None:
        self.view: Optional[View] = None
        self.progress = Progress()
        self.capabilities = set(capabilities)
        self.mount_count = 0

    def mount(self, view: View) -> View:
        """Replace the displayed view."""
        self.view = view
        self.mount_count += 1
        return view

    def has(self, capability: str) -> bool:
        return capability in self.capabilities

    @property
    def view_name(self) -> Optional[str]:
        return self.view.name if self.view else None
