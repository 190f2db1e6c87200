"""Application configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/pantrywise"
    database_echo: bool = False

    # Receipt OCR
    ocr_provider: str = "static"

    # Search
    search_default_limit: int = Field(default=5, ge=1, le=10)

    # Nutrition
    nutrition_tolerance_percent: float = 10.0
    nutrition_adherence_window_days: int = Field(default=14, ge=1)

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


def load_settings(**overrides: object) -> Settings:
    """Build a settings object from the environment, applying explicit overrides."""
    return Settings(**overrides)
