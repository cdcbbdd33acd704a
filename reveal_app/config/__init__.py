"""
Configuration module.

Tuning defaults, narrative content, YAML overrides and validation.
"""

from .content import ContentConfig
from .defaults import AppConfig, EvasionParams, FlowParams, SequencerParams, get_default_config
from .loader import ConfigLoader, load_config

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "ContentConfig",
    "EvasionParams",
    "FlowParams",
    "SequencerParams",
    "get_default_config",
    "load_config",
]
