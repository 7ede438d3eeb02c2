"""
CareScope Configuration Management
Handles application settings and delegation policy using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
from typing import List


class Settings(BaseSettings):
    """Application settings with validation"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )

    # Environment
    environment: str = Field(default="development", pattern="^(development|production|test)$")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    organization_name: str = Field(default="CareScope")

    # API Server
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000, ge=1, le=65535)
    api_reload: bool = Field(default=True)

    # Security
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )
    cors_allow_credentials: bool = Field(default=True)

    # Delegation Authorization
    default_auth_days: int = Field(default=90, ge=1, le=365)
    min_auth_days: int = Field(default=1, ge=1, le=365)
    max_auth_days: int = Field(default=180, ge=1, le=365)

    # Supervision (personal observation)
    initial_supervision_days: int = Field(default=60, ge=1, le=365)
    supervision_reset_days: int = Field(default=180, ge=1, le=365)
    supervision_due_window_days: int = Field(default=7, ge=0, le=90)

    # Status Thresholds
    due_soon_days: int = Field(default=14, ge=0, le=90)

    # Resident Assessments
    assessment_interval_days: int = Field(default=90, ge=1, le=365)
    assessment_due_soon_days: int = Field(default=14, ge=0, le=90)

    # Audit
    rescind_appends_audit: bool = Field(default=True)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @model_validator(mode="after")
    def validate_auth_window(self) -> "Settings":
        """Default authorization length must sit inside the allowed window"""
        if self.min_auth_days > self.max_auth_days:
            raise ValueError("min_auth_days cannot exceed max_auth_days")
        if not self.min_auth_days <= self.default_auth_days <= self.max_auth_days:
            raise ValueError("default_auth_days must be between min_auth_days and max_auth_days")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test"""
        return self.environment == "test"


# Global settings instance
settings = Settings()
