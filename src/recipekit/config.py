"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/recipekit"

    # Full-text search
    search_ts_config: str = "english"  # text search dictionary for to_tsquery

    # Rate limiting (sliding window, per caller)
    search_rate_limit_requests: int = 60
    search_rate_limit_window_seconds: float = 900.0  # 15 minutes
    api_read_rate_limit_requests: int = 120
    api_write_rate_limit_requests: int = 60
    api_rate_limit_window_seconds: float = 900.0

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
