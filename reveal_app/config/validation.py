"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_sequencer_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate animation pacing parameters."""
        errors = []

        if "reduced_motion_factor" in params:
            value = params["reduced_motion_factor"]
            if not _is_number(value) or value <= 0 or value >= 1:
                errors.append(ValidationError(
                    field="reduced_motion_factor",
                    message="Must be a number strictly between 0 and 1",
                    value=value
                ))

        if "reduced_motion" in params:
            value = params["reduced_motion"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="reduced_motion",
                    message="Must be a boolean",
                    value=value
                ))

        for name in ("fade_out_ms", "reveal_ms", "countdown_tick_ms", "countdown_final_ms", "ai_line_ms"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-negative number of milliseconds",
                        value=value
                    ))

        if "countdown_from" in params:
            value = params["countdown_from"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="countdown_from",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_evasion_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate evasive control parameters."""
        errors = []

        if "threshold" in params:
            value = params["threshold"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="threshold",
                    message="Must be a positive integer",
                    value=value
                ))

        if "cooldown_ms" in params:
            value = params["cooldown_ms"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="cooldown_ms",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "min_scale" in params:
            value = params["min_scale"]
            if not _is_number(value) or value <= 0 or value > 1:
                errors.append(ValidationError(
                    field="min_scale",
                    message="Must be a number in (0, 1]",
                    value=value
                ))

        if "offsets" in params:
            value = params["offsets"]
            valid = (
                isinstance(value, (list, tuple))
                and len(value) >= 2
                and all(isinstance(o, (list, tuple)) and len(o) == 2 and all(_is_number(c) for c in o)
                        for o in value)
            )
            if valid and len({tuple(o) for o in value}) < 2:
                valid = False
            if not valid:
                errors.append(ValidationError(
                    field="offsets",
                    message="Must list at least two distinct (x, y) pairs",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_flow_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate step flow parameters."""
        errors = []

        for name in ("terms_decline_limit", "game_target_score", "game_duration_s"):
            if name in params:
                value = params[name]
                if not _is_int(value) or value <= 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a positive integer",
                        value=value
                    ))

        for name in ("action_debounce_ms", "reset_guard_ms"):
            if name not in params:
                continue
            value = params[name]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field=name,
                    message="Must be a non-negative number",
                    value=value
                ))

        if "storage_key" in params:
            value = params["storage_key"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="storage_key",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_content(params: dict[str, Any]) -> list[ValidationError]:
        """Validate narrative content pools the engine indexes into."""
        errors = []

        for name in ("no_button_labels", "no_button_messages", "quiz_questions", "ai_analysis_results"):
            if name in params:
                value = params[name]
                if not isinstance(value, (list, tuple)) or len(value) == 0:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty list",
                        value=value
                    ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate every section of a merged configuration dictionary."""
        errors = []
        sections = {
            "sequencer": cls.validate_sequencer_params,
            "evasion": cls.validate_evasion_params,
            "flow": cls.validate_flow_params,
            "content": cls.validate_content,
        }

        for section, validator in sections.items():
            params = config.get(section, {})
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            for error in validator(params):
                errors.append(ValidationError(
                    field=f"{section}.{error.field}",
                    message=error.message,
                    value=error.value
                ))

        return errors
