from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="SIX_CITIES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # General
    app_name: str = "six-cities"
    distribution_name: str = "six-cities-cli"

    # HTTP client
    http_timeout_seconds: int = 20

    # Mock data: users whose "type" equals this value are professional hosts
    pro_user_type: str = "pro"

    # Import
    import_chunk_size: int = 64 * 1024

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


settings = Settings()


def get_settings() -> Settings:
    """Return the active application settings."""
    return settings
