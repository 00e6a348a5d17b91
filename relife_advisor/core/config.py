"""
Configuration management for relife-advisor.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Can be configured via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELIFE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Forecasting service (archetype listing and details)
    api_url: str = Field(default="http://localhost:8000/api", description="Base URL of the ReLIFE API gateway")
    forecasting_prefix: str = Field(default="/forecasting", description="Path prefix of the forecasting service")

    # Transport
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    max_retries: int = Field(default=3, description="Retries for transient upstream failures")
    retry_base_delay: float = Field(default=1.0, description="Initial backoff delay in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    @property
    def forecasting_url(self) -> str:
        return self.api_url.rstrip("/") + "/" + self.forecasting_prefix.strip("/")


# Default settings instance used at the composition root
settings = Settings()
