"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Self

from libs.domain_types import InterpretationMode


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "RCI Calculator API"
    APP_VERSION: str = "0.1.0"
    ENV: Literal["development", "production", "test"] = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Reliable Change Index
    RCI_DISPLAY_DECIMALS: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places used when formatting results for display",
    )
    RCI_DEFAULT_MODE: InterpretationMode = Field(
        default=InterpretationMode.ZSCORE,
        description="Interpretation mode used when a request does not choose one",
    )

    # Logging
    REQUEST_LOGGING_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_log_level(self) -> Self:
        """Reject log levels the logging module does not know."""
        level = self.LOG_LEVEL.upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(_VALID_LOG_LEVELS)}, "
                f"got {self.LOG_LEVEL!r}"
            )
        self.LOG_LEVEL = level
        return self


settings = Settings()
