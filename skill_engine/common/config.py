"""
Configuration loader for the skill engine.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """
    Centralized configuration for all engine components.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== MongoDB =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    SKILL_ENGINE_DATABASE: str = os.getenv("SKILL_ENGINE_DATABASE", "skills")

    # ===== Scoring Tables =====
    # Optional JSON file overriding the default weight/threshold tables
    SCORING_CONFIG_PATH: str = os.getenv("SCORING_CONFIG_PATH", "")

    # ===== Team Recommendations =====
    DEFAULT_TEAM_SIZE: int = int(os.getenv("DEFAULT_TEAM_SIZE", "5"))
    DEFAULT_INCLUDE_PARTIAL_MATCHES: bool = _env_bool("DEFAULT_INCLUDE_PARTIAL_MATCHES", "true")

    # ===== Profile Refresh =====
    PROFILE_BUILD_WORKERS: int = int(os.getenv("PROFILE_BUILD_WORKERS", "4"))
    # Attempts per person when persistence fails transiently (caller-side retry)
    PERSISTENCE_MAX_ATTEMPTS: int = int(os.getenv("PERSISTENCE_MAX_ATTEMPTS", "3"))

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        required_settings = {
            "MONGODB_URI": cls.MONGODB_URI,
        }

        missing = [name for name, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.DEFAULT_TEAM_SIZE <= 0:
            raise ValueError(f"DEFAULT_TEAM_SIZE must be positive, got {cls.DEFAULT_TEAM_SIZE}")

        if cls.PROFILE_BUILD_WORKERS <= 0:
            raise ValueError(
                f"PROFILE_BUILD_WORKERS must be positive, got {cls.PROFILE_BUILD_WORKERS}"
            )

        if cls.SCORING_CONFIG_PATH and not Path(cls.SCORING_CONFIG_PATH).exists():
            raise FileNotFoundError(
                f"Scoring config file not found: {cls.SCORING_CONFIG_PATH}"
            )

    @classmethod
    def get_scoring_config_path(cls) -> Optional[Path]:
        """Path of the scoring table override, or None to use the built-in tables."""
        if cls.SCORING_CONFIG_PATH:
            return Path(cls.SCORING_CONFIG_PATH)
        return None

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  MongoDB: {'✓ Configured' if cls.MONGODB_URI else '✗ Missing'}
  Database: {cls.SKILL_ENGINE_DATABASE}
  Scoring Tables: {cls.SCORING_CONFIG_PATH or 'built-in defaults'}
  Default Team Size: {cls.DEFAULT_TEAM_SIZE}
  Partial Matches: {'Included' if cls.DEFAULT_INCLUDE_PARTIAL_MATCHES else 'Excluded'}
  Profile Workers: {cls.PROFILE_BUILD_WORKERS}
  Persistence Attempts: {cls.PERSISTENCE_MAX_ATTEMPTS}
  Logging: {cls.LOG_LEVEL} ({cls.LOG_FORMAT})
        """.strip()
