"""Configuration models and loading."""

from .config import (
    Config,
    DriverSettings,
    ExtractionSettings,
    KeywordSettings,
    MonitoringConfig,
    OutputSettings,
    RewriterSettings,
    SelectorRuleSettings,
    find_config_file,
    load_config,
)

__all__ = [
    "Config",
    "DriverSettings",
    "ExtractionSettings",
    "KeywordSettings",
    "MonitoringConfig",
    "OutputSettings",
    "RewriterSettings",
    "SelectorRuleSettings",
    "find_config_file",
    "load_config",
]
