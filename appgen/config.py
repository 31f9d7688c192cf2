"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file and override existing env vars
load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: Literal["development", "staging", "production"] = "development"
    app_debug: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Upstream text generation
    anthropic_api_key: str = Field(default="")
    generation_model: str = "claude-3-sonnet-20240229"
    generation_max_tokens: int = Field(default=4096, gt=0)
    generation_temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    generation_timeout_seconds: float = Field(default=120.0, gt=0)
    generation_max_retries: int = Field(default=0, ge=0)  # 0 disables retry
    generation_retry_backoff_seconds: float = Field(default=1.0, ge=0)
    explanation_max_tokens: int = Field(default=2048, gt=0)
    explanation_temperature: float = Field(default=0.3, ge=0.0, le=1.0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_directory: str = "logs"
    log_file_name: str = "appgen.log"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def has_upstream_credentials(self) -> bool:
        """Check whether a provider API key is configured."""
        return bool(self.anthropic_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
