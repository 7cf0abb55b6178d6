"""
ArbiScan — Central Configuration
All settings are loaded from environment variables with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional


class DataSourceSettings(BaseSettings):
    """Upstream endpoints, transport and cache tuning."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    coingecko_base_url: str = Field(default="https://api.coingecko.com/api/v3")
    binance_base_url: str = Field(default="https://api.binance.com/api/v3")

    request_timeout_seconds: float = Field(default=10.0, gt=0)
    cache_ttl_seconds: int = Field(default=60, gt=0)
    cache_max_entries: int = Field(default=10_000, gt=0)


class MarketSettings(BaseSettings):
    """Coin universe, result caps and arbitrage scan parameters."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    supported_coins: List[str] = Field(
        default=[
            "bitcoin",
            "ethereum",
            "ripple",
            "litecoin",
            "cardano",
            "polkadot",
            "chainlink",
        ]
    )
    quote_asset: str = Field(default="USDT")
    vs_currency: str = Field(default="usd")

    max_exchanges_per_coin: int = Field(default=10, gt=0)
    max_exchange_listing: int = Field(default=20, gt=0)
    markets_page_size: int = Field(default=100, gt=0)
    default_history_days: int = Field(default=7, ge=1)

    min_arbitrage_percentage: float = Field(default=1.0, ge=0)
    scan_concurrency: int = Field(default=4, ge=1)
    scan_timeout_seconds: float = Field(default=5.0, gt=0)
    # Spot quotes are treated as pre-vetted
    spot_trust_score: str = Field(default="green")


class AppSettings(BaseSettings):
    """Top-level application settings."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "ArbiScan"
    version: str = "1.0.0"
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)

    data: DataSourceSettings = DataSourceSettings()
    market: MarketSettings = MarketSettings()


# Singleton
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
