"""Application configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Wallet settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="tronwallet", description="Application name")
    environment: Literal["development", "testing", "staging", "production"] = Field(
        default="development", description="Runtime environment"
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    # Network selection
    tron_network: Literal["mainnet", "shasta", "nile"] = Field(
        default="mainnet", description="TRON network selection"
    )
    tron_mainnet_url: str = Field(
        default="https://api.trongrid.io",
        description="TRON mainnet full-node HTTP endpoint",
    )
    tron_shasta_url: str = Field(
        default="https://api.shasta.trongrid.io",
        description="Shasta testnet full-node HTTP endpoint",
    )
    tron_nile_url: str = Field(
        default="https://nile.trongrid.io",
        description="Nile testnet full-node HTTP endpoint",
    )
    tron_api_key: str | None = Field(
        default=None, description="TronGrid API key (TRON-PRO-API-KEY header)"
    )
    request_timeout: float = Field(
        default=10.0, description="Node request timeout in seconds"
    )

    # Amounts
    token_decimals: int = Field(
        default=6, description="Decimals of the default TRC-20 token (USDT: 6)"
    )
    fee_limit: int = Field(
        default=100_000_000,  # 100 TRX
        description="Fee limit in SUN for state-changing contract triggers",
    )

    # Event watcher
    watcher_poll_interval: float = Field(
        default=0.1, description="Delay between block fetches in seconds"
    )
    watcher_reconnect_delay: float = Field(
        default=1.0, description="Base delay after a failed block fetch"
    )
    watcher_max_reconnect_attempts: int = Field(
        default=5, description="Consecutive failed fetches before giving up"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "logfmt"] = Field(
        default="console", description="Log output format"
    )

    @computed_field
    @property
    def active_node_url(self) -> str:
        """Get node URL based on current network selection."""
        if self.tron_network == "shasta":
            return self.tron_shasta_url
        if self.tron_network == "nile":
            return self.tron_nile_url
        return self.tron_mainnet_url

    @computed_field
    @property
    def is_mainnet(self) -> bool:
        """Check whether the mainnet is selected."""
        return self.tron_network == "mainnet"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
