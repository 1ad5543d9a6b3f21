"""
Configuration management for Weather Aggregator Service.
Uses pydantic-settings for environment variable management.
"""

from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings

from ..api.schemas import WeatherProvider


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application metadata
    app_name: str = Field(default="Weather Aggregator", env="APP_NAME")
    app_version: str = Field(default="1.0.0", env="APP_VERSION")
    debug: bool = Field(default=False, env="DEBUG")

    # Server configuration
    server_host: str = Field(default="0.0.0.0", env="SERVER_HOST")
    server_port: int = Field(default=3000, env="SERVER_PORT")

    # API keys for weather providers (a provider without its key is skipped at startup)
    openweathermap_api_key: Optional[str] = Field(default=None, env="OPENWEATHERMAP_API_KEY")
    weatherbit_api_key: Optional[str] = Field(default=None, env="WEATHERBIT_API_KEY")
    climacell_api_key: Optional[str] = Field(default=None, env="CLIMACELL_API_KEY")
    opencage_api_key: Optional[str] = Field(default=None, env="OPENCAGE_API_KEY")

    # Provider endpoints
    openweathermap_api_url: str = Field(default="http://api.openweathermap.org", env="OPENWEATHERMAP_API_URL")
    weatherbit_api_url: str = Field(default="https://api.weatherbit.io", env="WEATHERBIT_API_URL")
    climacell_api_url: str = Field(default="https://api.climacell.co", env="CLIMACELL_API_URL")
    opencage_api_url: str = Field(default="https://api.opencagedata.com", env="OPENCAGE_API_URL")

    # Providers queried for every request, in order
    enabled_providers: str = Field(
        default="openweathermap,weatherbit,climacell",
        env="ENABLED_PROVIDERS"
    )

    # Per-provider deadline in seconds for one measurement (0 disables it)
    provider_timeout_seconds: float = Field(default=10.0, env="PROVIDER_TIMEOUT_SECONDS")

    # HTTP client configuration (in seconds)
    http_timeout: float = Field(default=30.0, env="HTTP_TIMEOUT")
    http_connect_timeout: float = Field(default=10.0, env="HTTP_CONNECT_TIMEOUT")

    # Logging configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")

    @validator('enabled_providers')
    def validate_enabled_providers(cls, v: str) -> str:
        """Validate that enabled_providers only names known providers."""
        valid_providers = {provider.value for provider in WeatherProvider}
        names = [name.strip().lower() for name in v.split(',') if name.strip()]
        unknown = [name for name in names if name not in valid_providers]
        if unknown:
            raise ValueError(
                f"enabled_providers contains unknown providers: {', '.join(unknown)}"
            )
        return ','.join(names)

    @validator('provider_timeout_seconds')
    def validate_provider_timeout(cls, v: float) -> float:
        """Validate provider timeout."""
        if v < 0:
            raise ValueError("provider_timeout_seconds cannot be negative")
        return v

    @validator('log_level')
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {'json', 'text'}
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {', '.join(valid_formats)}")
        return v.lower()

    def get_enabled_providers_list(self) -> List[str]:
        """Get enabled providers as a list."""
        return [name for name in self.enabled_providers.split(',') if name]

    def get_provider_timeout(self) -> Optional[float]:
        """Get the per-provider timeout, or None when disabled."""
        return self.provider_timeout_seconds or None

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
