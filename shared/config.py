"""
Shared configuration management for the Market Signal Proxy.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROXY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = "local"
    log_level: str = "info"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Throttling
    throttle_min_interval_seconds: float = 0.5

    # Upstreams
    upstream_timeout_seconds: float = 30.0
    market_data_base_url: str = "https://query1.finance.yahoo.com"
    reddit_base_url: str = "https://www.reddit.com"
    reddit_user_agent: str = "TradingApp/1.0"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Secrets
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PROXY_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    host: str = "0.0.0.0"
    port: int = Field(default=3001, validation_alias=AliasChoices("PROXY_PORT", "PORT"))

    def __init__(self, service_name: str, **kwargs):
        super().__init__(service_name=service_name, **kwargs)


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
