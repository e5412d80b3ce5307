"""Application configuration using pydantic-settings.

All environment variables should be accessed through the settings object
rather than using os.getenv() directly. The authentication mode is an
explicit setting chosen at startup; request handling never branches on the
runtime environment.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database - SQLite file by default, override via DATABASE_URL for PostgreSQL
    database_url: str = "sqlite:///./data/laundry.db"

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 1 day

    # Token revocation store; the in-process list is used when unset or unreachable
    redis_url: Optional[str] = None

    # "token" authenticates every request; "mock" injects a fixed user (local dev only)
    auth_mode: Literal["token", "mock"] = "token"
    mock_user_role: str = "admin"

    # CORS - comma-separated origins
    cors_origins: str = "http://localhost:3000,http://localhost:5000"

    # Server
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # API
    api_prefix: str = "/api"

    # Rate limiting
    rate_limit_enabled: bool = True

    # Task IDs
    task_id_max_retries: int = 5

    # Equipment maintenance
    maintenance_interval_days: int = 90
    maintenance_upcoming_days: int = 7

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Refuse insecure settings outside debug mode."""
        import warnings

        if self.debug:
            if self.secret_key == DEFAULT_SECRET_KEY:
                warnings.warn(
                    "Using default SECRET_KEY is insecure! Set SECRET_KEY environment variable.",
                    UserWarning,
                    stacklevel=2,
                )
            return self

        if self.secret_key == DEFAULT_SECRET_KEY or len(self.secret_key) < 32:
            raise ValueError(
                "FATAL: SECRET_KEY must be set to a value of at least 32 characters in production mode. "
                "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )
        if self.auth_mode == "mock":
            raise ValueError("FATAL: AUTH_MODE=mock is not allowed in production mode.")
        return self

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
