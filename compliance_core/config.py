"""Application configuration via environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration for the compliance analysis core."""

    # Application
    app_name: str = "Compliance Analysis Core"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern=r"^(development|staging|production)$")
    log_level: str = "INFO"
    log_format: str = "json"

    # API
    api_prefix: str = "/api"
    allowed_origins: str = "http://localhost:3000"
    rate_limit_default: str = "100/minute"

    # Storage
    storage_backend: str = Field(default="memory", pattern=r"^(memory|sql)$")
    database_url: str = "sqlite:///./compliance.db"

    # Vendor matching
    default_match_limit: int = Field(default=10, ge=1)
    max_match_limit: int = Field(default=100, ge=1)

    # Billing gates
    credits_per_assessment: int = Field(default=50, ge=0)

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",")]

    model_config = {"env_prefix": "COMPLIANCE_", "env_file": ".env", "extra": "ignore"}


def get_settings() -> Settings:
    """Return a settings instance built from the environment."""
    return Settings()
