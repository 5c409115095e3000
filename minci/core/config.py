"""Application configuration using Pydantic Settings"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # App Configuration
    APP_NAME: str = "minci"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./minci.db"

    # Report signing: any hashlib algorithm name. Runners in the field sign with md5.
    SIGNATURE_DIGEST: str = "md5"

    # Rendering Configuration
    COMMIT_BASE: str = "https://github.com/kristapsdz"
    LOG_TAIL_LINES: int = 16

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


# Global settings instance
settings = Settings()
