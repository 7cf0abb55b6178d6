"""
ArbiScan — Upstream Response Schemas
Explicit shapes for the payloads each upstream returns. Required fields are
validated at the adapter boundary; unknown fields are ignored.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Tuple, Union
from datetime import datetime


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ─── CoinGecko ──────────────────────────────────────────────────

class CoinGeckoMarketRow(UpstreamModel):
    id: str
    symbol: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    market_cap_rank: Optional[int] = None
    total_volume: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    last_updated: Optional[datetime] = None


class CoinGeckoMarket(UpstreamModel):
    name: str
    identifier: Optional[str] = None


class CoinGeckoTicker(UpstreamModel):
    base: str
    target: str
    market: CoinGeckoMarket
    last: Optional[float] = None
    volume: Optional[float] = None
    converted_last: Dict[str, Optional[float]] = Field(default_factory=dict)
    trust_score: Optional[Union[str, float]] = None
    timestamp: Optional[datetime] = None


class CoinGeckoImage(UpstreamModel):
    large: Optional[str] = None


class CoinGeckoMarketData(UpstreamModel):
    current_price: Dict[str, Optional[float]]
    market_cap: Dict[str, Optional[float]] = Field(default_factory=dict)
    total_volume: Dict[str, Optional[float]] = Field(default_factory=dict)
    high_24h: Dict[str, Optional[float]] = Field(default_factory=dict)
    low_24h: Dict[str, Optional[float]] = Field(default_factory=dict)
    price_change_percentage_24h: Optional[float] = None
    price_change_percentage_7d: Optional[float] = None
    price_change_percentage_30d: Optional[float] = None


class CoinGeckoCoin(UpstreamModel):
    id: str
    symbol: str
    name: str
    image: Optional[CoinGeckoImage] = None
    market_cap_rank: Optional[int] = None
    market_data: CoinGeckoMarketData
    tickers: List[CoinGeckoTicker] = Field(default_factory=list)
    last_updated: Optional[datetime] = None


class CoinGeckoExchangeRow(UpstreamModel):
    id: str
    name: str
    url: Optional[str] = None
    image: Optional[str] = None
    trust_score: Optional[float] = None
    trust_score_rank: Optional[int] = None
    trade_volume_24h_btc: Optional[float] = None


class CoinGeckoMarketChart(UpstreamModel):
    prices: List[Tuple[float, float]]


# ─── Binance ────────────────────────────────────────────────────

class BinanceTickerPrice(UpstreamModel):
    symbol: str
    price: float


class BinanceTicker24h(UpstreamModel):
    symbol: str
    lastPrice: float
    priceChangePercent: Optional[float] = None
    highPrice: Optional[float] = None
    lowPrice: Optional[float] = None
    volume: Optional[float] = None
    closeTime: Optional[int] = None
