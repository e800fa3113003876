"""Configuration management for mongopaging."""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    app_name: str = "Mongo Paging API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Database settings
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "mongopaging"
    mongodb_timeout_ms: int = 5000

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Pagination settings
    default_page_size: int = 50
    max_page_size: int = 200
    default_sort: str = "-_id"
    cursor_secret: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def validate_page_size(cls, v):
        """Page sizes must be positive."""
        if v < 1:
            raise ValueError("Page size must be at least 1")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": "null",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
