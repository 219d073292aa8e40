"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    transactions_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "fintrack-analytics"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Analysis
    trend_window_days: int = 30
    default_period_days: int = 30  # Used when a request omits start; trend needs 2x trend_window_days


settings = Settings()
