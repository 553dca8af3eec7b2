"""
crewplan Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "crewplan"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # CALENDAR
    # =========================================================================
    # Python weekday numbering: 0 = Monday
    WEEK_STARTS_ON: int = 0

    # =========================================================================
    # BOOKINGS
    # =========================================================================
    MIN_BOOKING_DURATION_DAYS: int = 1
    UNASSIGNED_TEAM_ID: str = "unassigned"

    # =========================================================================
    # OVERLAP RESOLUTION
    # =========================================================================
    DEFAULT_START_HOUR: int = 8
    DEFAULT_END_HOUR: int = 17
    MAX_RESOLUTION_ROUNDS: int = 5

    # =========================================================================
    # AUTO-ASSIGNMENT
    # =========================================================================
    AUTO_ASSIGN_SKIP_WEEKENDS: bool = False
    AUTO_ASSIGN_NOTE: str = "Auto-assigned as permanent team member"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
