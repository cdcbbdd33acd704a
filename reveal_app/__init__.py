"""
Reveal App - Interactive Reveal Narrative Engine

Coordination layer for a seven-step interactive reveal: a persisted observable
state store, a cancellable animation sequencer, an evasive control state
machine and the step dispatcher that renders the current step onto a surface.
"""

__version__ = "0.1.0"
__author__ = "Reveal Team"
