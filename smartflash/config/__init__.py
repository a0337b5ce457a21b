"""Configuration package."""

from smartflash.config.settings import (
    Settings,
    StudyConfig,
    configure_logging,
    get_settings,
    load_yaml_config,
    settings,
    study_config,
    yaml_config,
)

__all__ = [
    "Settings",
    "StudyConfig",
    "configure_logging",
    "get_settings",
    "load_yaml_config",
    "settings",
    "study_config",
    "yaml_config",
]
