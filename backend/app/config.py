"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    DATABASE_URL: str

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Holiday calendar window (years outside it are computed on demand)
    HOLIDAY_CALENDAR_START_YEAR: int = 2020
    HOLIDAY_CALENDAR_END_YEAR: int = 2040

    # Payback generation batch job
    PAYBACK_BATCH_SIZE: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def is_test(self) -> bool:
        """Whether the application runs under the test environment."""
        return self.ENVIRONMENT == "test"


# Global settings instance
settings = Settings()
