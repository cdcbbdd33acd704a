"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from .content import (
    AnalysisLine,
    ContentConfig,
    NarrativeItem,
    QuizOption,
    QuizQuestion,
    Quote,
    ResultCategory,
    TermsSection,
)
from .defaults import AppConfig, EvasionParams, FlowParams, SequencerParams, get_default_config
from .validation import ConfigValidator


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: AppConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_yaml(self, filename: str) -> dict[str, Any]:
        """Load one YAML file from the config directory, empty if absent."""
        path = self.config_dir / filename

        if not path.exists():
            return {}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping at top level")
        return data

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. settings.yaml and content.yaml in the config directory
        3. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_yaml("settings.yaml"))

        content_file = self.load_yaml("content.yaml")
        if content_file:
            config = self._deep_merge(config, {"content": content_file})

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> AppConfig:
        """Merge, validate and build the typed configuration."""
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            details = "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors)
            raise ValueError(f"Invalid configuration: {details}")

        return build_app_config(config)

    def _dataclass_to_dict(self, obj: Any) -> Any:
        """Convert nested dataclasses (and tuples of them) to plain data."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                result[field_name] = self._dataclass_to_dict(getattr(obj, field_name))
            return result
        if isinstance(obj, tuple):
            return [self._dataclass_to_dict(item) for item in obj]
        return obj

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def _tupled(params: dict[str, Any], cls: type) -> dict[str, Any]:
    """Keep only the dataclass fields and turn lists back into tuples."""
    names = {f.name for f in fields(cls)}
    return {
        key: tuple(value) if isinstance(value, list) else value
        for key, value in params.items()
        if key in names
    }


def build_content_config(data: dict[str, Any]) -> ContentConfig:
    """Build ContentConfig from plain data, converting nested records."""
    kwargs = _tupled(data, ContentConfig)

    if "narrative" in kwargs:
        kwargs["narrative"] = tuple(NarrativeItem(**item) for item in kwargs["narrative"])
    if "quiz_questions" in kwargs:
        kwargs["quiz_questions"] = tuple(
            QuizQuestion(
                question=item["question"],
                options=tuple(QuizOption(**opt) for opt in item["options"]),
            )
            for item in kwargs["quiz_questions"]
        )
    if "quiz_result_categories" in kwargs:
        kwargs["quiz_result_categories"] = tuple(
            ResultCategory(**item) for item in kwargs["quiz_result_categories"]
        )
    if "terms_sections" in kwargs:
        kwargs["terms_sections"] = tuple(
            TermsSection(title=item["title"], clauses=tuple(item["clauses"]))
            for item in kwargs["terms_sections"]
        )
    if "ai_analysis_results" in kwargs:
        kwargs["ai_analysis_results"] = tuple(
            AnalysisLine(**item) for item in kwargs["ai_analysis_results"]
        )
    if "friend_quotes" in kwargs:
        kwargs["friend_quotes"] = tuple(Quote(**item) for item in kwargs["friend_quotes"])

    return ContentConfig(**kwargs)


def build_app_config(config: dict[str, Any]) -> AppConfig:
    """Build AppConfig from a merged configuration dictionary."""
    evasion = _tupled(config.get("evasion", {}), EvasionParams)
    if "offsets" in evasion:
        evasion["offsets"] = tuple(tuple(offset) for offset in evasion["offsets"])

    return AppConfig(
        sequencer=SequencerParams(**_tupled(config.get("sequencer", {}), SequencerParams)),
        evasion=EvasionParams(**evasion),
        flow=FlowParams(**_tupled(config.get("flow", {}), FlowParams)),
        content=build_content_config(config.get("content", {})),
    )


def load_config(config_dir: Optional[Path] = None,
                overrides: Optional[dict[str, Any]] = None) -> AppConfig:
    """Convenience wrapper: create a loader and load the typed configuration."""
    return ConfigLoader.create(config_dir).load(overrides)
