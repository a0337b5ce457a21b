"""
Client Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables (prefixed with SMARTFLASH_) are loaded from a .env file
and validated. UX constants that rarely change live in default.yaml, which
ships inside this package.

Usage:
    from smartflash.config import settings, study_config

    # Access settings
    base_url = settings.API_BASE_URL
    timeout = settings.API_TIMEOUT_SECONDS

    # Access YAML defaults
    toast_ms = study_config.completed_toast_ms
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from smartflash.enums.api import StorageBackend


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SMARTFLASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "SmartFlash"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Backend REST API
    # Android emulators reach the host via http://10.0.2.2:5000, physical
    # devices need the host's LAN address.
    API_BASE_URL: str = "http://localhost:5000"
    # AI module generation can take well over a minute
    API_TIMEOUT_SECONDS: float = 120.0

    # Sent as x-user-id until a real user id is stored after login
    DEFAULT_USER_ID: str = "default-user-id"

    # Credential storage
    STORAGE_BACKEND: StorageBackend = StorageBackend.SECURE
    STORAGE_PATH: str = "~/.smartflash/credentials.json"

    @property
    def storage_file(self) -> Path:
        """Expanded path of the credential store file."""
        return Path(self.STORAGE_PATH).expanduser()

    @property
    def log_level(self) -> int:
        """Numeric logging level (DEBUG forces verbose output)."""
        if self.DEBUG:
            return logging.DEBUG
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


def load_yaml_config(config_path: Optional[Path] = None) -> dict[str, Any]:
    """Load client configuration (default: the packaged default.yaml)."""
    config_path = config_path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()


@dataclass(frozen=True)
class StudyConfig:
    """
    Study UX constants.

    Attributes:
        completed_toast_ms: Toast duration after finishing a module
        session_end_toast_ms: Toast duration after a generic session end
        completed_redirect_ms: Delay before leaving the study screen after
            finishing a module
        session_end_redirect_ms: Delay before leaving after a generic end
        recent_sessions_limit: Sessions shown on the dashboard
        latest_modules_limit: Modules shown on the dashboard
        sample_cards: Cards previewed on the module detail screen
        ai_default_cards: Default card count for AI module generation
        ai_default_difficulty: Default difficulty for AI module generation
    """

    completed_toast_ms: int = 4000
    session_end_toast_ms: int = 3000
    completed_redirect_ms: int = 1500
    session_end_redirect_ms: int = 1000
    recent_sessions_limit: int = 5
    latest_modules_limit: int = 3
    sample_cards: int = 3
    ai_default_cards: int = 20
    ai_default_difficulty: str = "intermediate"

    @classmethod
    def from_yaml(cls, config: dict[str, Any]) -> "StudyConfig":
        """Build from the parsed YAML config, falling back to defaults."""
        study = config.get("study", {}) or {}
        toasts = study.get("toasts", {}) or {}
        redirects = study.get("redirects", {}) or {}
        dashboard = config.get("dashboard", {}) or {}
        ai = config.get("ai_generation", {}) or {}

        return cls(
            completed_toast_ms=toasts.get("module_completed_ms", cls.completed_toast_ms),
            session_end_toast_ms=toasts.get("session_end_ms", cls.session_end_toast_ms),
            completed_redirect_ms=redirects.get(
                "module_completed_ms", cls.completed_redirect_ms
            ),
            session_end_redirect_ms=redirects.get(
                "session_end_ms", cls.session_end_redirect_ms
            ),
            recent_sessions_limit=dashboard.get(
                "recent_sessions", cls.recent_sessions_limit
            ),
            latest_modules_limit=dashboard.get("latest_modules", cls.latest_modules_limit),
            sample_cards=dashboard.get("sample_cards", cls.sample_cards),
            ai_default_cards=ai.get("number_of_cards", cls.ai_default_cards),
            ai_default_difficulty=ai.get("difficulty_level", cls.ai_default_difficulty),
        )


study_config = StudyConfig.from_yaml(yaml_config)


def configure_logging(level: Optional[int] = None) -> None:
    """Configure root logging for the client."""
    level = level if level is not None else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    # Reduce noise from httpx (unless debugging)
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
