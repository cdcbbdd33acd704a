"""
Beat scripts for the animated steps.

Each builder takes the mounted view it animates and returns the beats that
mutate it. Builders never touch the store; completion is handled by the
caller through ``AnimationSequencer.run_phases``.
"""

from ..config.content import ContentConfig
from ..config.defaults import SequencerParams
from ..steps.views import View
from .sequencer import Beat


def intro_narrative_beats(view: View, content: ContentConfig, params: SequencerParams) -> list[Beat]:
    """Narrative items shown one at a time, each fading out the previous one."""
    beats: list[Beat] = []

    def fade_out() -> None:
        view.flags["fading"] = True

    def show(kind: str, text: str):
        def apply() -> None:
            view.content = text
            view.flags["content_kind"] = kind
            view.flags["fading"] = False
            view.flags["content_visible"] = False
        return apply

    def make_visible() -> None:
        view.flags["content_visible"] = True

    for index, item in enumerate(content.narrative):
        if index > 0:
            beats.append(Beat(fade_out, params.fade_out_ms))
        beats.append(Beat(show(item.kind, content.fill(item.content)), params.reveal_ms))
        beats.append(Beat(make_visible, item.delay_ms))

    return beats


def countdown_beats(view: View, content: ContentConfig, params: SequencerParams) -> list[Beat]:
    """Numeric countdown with system log lines, two per second, then the final glyph."""
    beats: list[Beat] = []
    logs = content.system_logs
    cursor = {"index": 0}

    def enter_countdown() -> None:
        view.content = str(params.countdown_from)
        view.flags["content_kind"] = "countdown"
        view.flags["content_visible"] = True
        view.flags["fading"] = False
        view.log.clear()

    def add_log() -> None:
        if cursor["index"] < len(logs):
            view.log.append(f"> {logs[cursor['index']]}")
            cursor["index"] += 1

    def tick(number: int):
        def apply() -> None:
            view.content = str(number)
            view.flags["pulse"] = view.flags.get("pulse", 0) + 1
            add_log()
        return apply

    beats.append(Beat(enter_countdown))
    for number in range(params.countdown_from, 0, -1):
        beats.append(Beat(tick(number), params.countdown_tick_ms))
        beats.append(Beat(add_log, params.countdown_tick_ms))

    def final_glyph() -> None:
        view.content = content.countdown_final_glyph

    beats.append(Beat(final_glyph, params.countdown_final_ms))
    return beats


def analysis_reveal_beats(view: View, params: SequencerParams) -> list[Beat]:
    """Reveal the analysis lines one by one, then the conclusion, then the buttons."""
    beats: list[Beat] = []

    def reveal(line_index: int):
        def apply() -> None:
            view.lines[line_index].visible = True
        return apply

    for index in range(len(view.lines)):
        beats.append(Beat(reveal(index), params.ai_line_ms))

    def show_conclusion() -> None:
        view.flags["conclusion_visible"] = True

    def show_buttons() -> None:
        for action in view.actions:
            action.visible = True

    beats.append(Beat.pause(params.ai_line_ms))
    beats.append(Beat(show_conclusion, params.ai_line_ms))
    beats.append(Beat(show_buttons))
    return beats
