"""
Configuration for the Roomy Listing Parser API.

Values come from environment variables (or a local ``.env`` file) and are
validated on load. Variable names are case-sensitive and match the field
names below, except ``CORS_ORIGINS`` which is a comma-separated string.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Validated service settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        validate_assignment=True,
        use_enum_values=True,
        env_parse_none_str="None",
        extra="ignore",
    )

    API_TITLE: str = "Roomy Listing Parser API"
    API_VERSION: str = "1.0.0"
    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    LOG_LEVEL: LogLevel = LogLevel.INFO

    CORS_ORIGINS_STR: str = Field(default="*", alias="CORS_ORIGINS")

    # Listing page fetch deadline, seconds
    FETCH_TIMEOUT: float = Field(default=10.0, ge=1, le=60)

    # Parse endpoint: requests per client IP per window
    RATE_LIMIT_PER_MINUTE: int = Field(default=10, ge=1, le=10000)
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60, ge=1, le=3600)

    MAX_URL_LENGTH: int = Field(default=2000, ge=100, le=10000)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.upper()
        return value

    @model_validator(mode="after")
    def warn_on_unsafe_production_settings(self) -> "Settings":
        """Production should not run with wildcard CORS or DEBUG logging"""
        if not self.is_production:
            return self

        if "*" in self.CORS_ORIGINS:
            logging.warning(
                "Running in production with wildcard CORS origins; "
                "set CORS_ORIGINS to the Roomy frontend origins."
            )
        if self.LOG_LEVEL == LogLevel.DEBUG:
            logging.warning(
                "Running in production with DEBUG log level; "
                "listing URLs and fetch details will be logged."
            )
        return self

    def get_environment_config(self) -> Dict[str, Any]:
        """
        Settings the FastAPI app is built with.

        Production always logs at INFO and hides the interactive docs.
        """
        return {
            "api_title": self.API_TITLE,
            "api_version": self.API_VERSION,
            "environment": self.ENVIRONMENT,
            "debug": self.ENVIRONMENT == Environment.DEVELOPMENT,
            "log_level": LogLevel.INFO.value if self.is_production else self.LOG_LEVEL,
            "enable_docs": not self.is_production,
        }

    def get_rate_limit_config(self) -> Dict[str, Any]:
        """Keyword arguments for ``RateLimiter``"""
        return {
            "max_requests": self.RATE_LIMIT_PER_MINUTE,
            "window_seconds": self.RATE_LIMIT_WINDOW_SECONDS,
        }


def get_settings() -> Settings:
    """Load settings from the current environment"""
    return Settings()


settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Process-wide settings, loaded on first use"""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
