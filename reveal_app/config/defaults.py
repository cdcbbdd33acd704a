"""Default tuning parameters for the reveal narrative engine."""

from dataclasses import dataclass

from .content import ContentConfig


@dataclass(frozen=True)
class SequencerParams:
    """Animation pacing parameters."""
    reduced_motion: bool = False                     # Scale every delay by reduced_motion_factor
    reduced_motion_factor: float = 0.3               # Multiplier in (0, 1), delays never skipped

    # Intro narrative
    fade_out_ms: int = 400                           # Fade of the previous narrative item
    reveal_ms: int = 50                              # Mount-to-visible delay of a new item

    # Countdown phase
    countdown_from: int = 3
    countdown_tick_ms: int = 500                     # One system log line per tick, two per second
    countdown_final_ms: int = 500                    # Hold on the final glyph

    # AI analysis reveal
    ai_line_ms: int = 400


@dataclass(frozen=True)
class EvasionParams:
    """Evasive control escalation parameters."""
    threshold: int = 6                               # Attempts before the control disarms
    cooldown_ms: int = 500                           # Debounce window for hover/touch storms
    min_scale: float = 0.7
    scale_step: float = 0.05                         # Shrink per attempt
    offsets: tuple[tuple[int, int], ...] = (
        (-120, 0),
        (120, 0),
        (-80, -30),
        (80, -30),
        (-100, 20),
        (100, 20),
        (0, -40),
        (-60, 30),
        (60, 30),
    )


@dataclass(frozen=True)
class FlowParams:
    """Step flow parameters."""
    action_debounce_ms: int = 300                    # Double-trigger guard for input actions
    reset_guard_ms: int = 500                        # Separate guard for the reset control
    terms_decline_limit: int = 2                     # Declines before the not-now path opens
    game_target_score: int = 10
    game_duration_s: int = 20
    storage_key: str = "reveal_app_state"


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    sequencer: SequencerParams
    evasion: EvasionParams
    flow: FlowParams
    content: ContentConfig


def get_default_config() -> AppConfig:
    """Get the default configuration instance."""
    return AppConfig(
        sequencer=SequencerParams(),
        evasion=EvasionParams(),
        flow=FlowParams(),
        content=ContentConfig(),
    )
