"""Configuration management for Qveris MCP"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://qveris.ai/api/v1"


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API access
    qveris_api_key: str | None = None
    qveris_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 60.0

    # Logging goes to stderr; stdout carries the MCP protocol
    log_level: str = "INFO"

    # HTTP server settings
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @property
    def has_api_key(self) -> bool:
        """Check if the Qveris API key is configured"""
        return bool(self.qveris_api_key)


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
