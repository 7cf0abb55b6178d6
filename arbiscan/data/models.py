"""
ArbiScan — Data Models for Market Data
Canonical, adapter-independent structures used across the platform.
All models are frozen: values are never mutated once built.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


class DataSource(str, Enum):
    COINGECKO = "coingecko"
    BINANCE = "binance"


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class PricePoint(FrozenModel):
    """One exchange's quote for one coin."""
    symbol: str
    exchange: str
    pair: str
    price: float = Field(gt=0)
    volume_24h: Optional[float] = Field(default=None, ge=0)
    trust_score: Optional[Union[str, float]] = None
    last_updated: datetime


class CoinMarket(FrozenModel):
    """Row of the rich source's bulk listing; defines the coin universe."""
    id: str
    symbol: str = ""
    name: str = ""
    image: Optional[str] = None
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    market_cap_rank: Optional[int] = None
    total_volume: Optional[float] = None
    price_change_24h: Optional[float] = None
    last_updated: Optional[datetime] = None


class CoinSnapshot(FrozenModel):
    """Full metadata for one coin plus its top exchange quotes."""
    id: str
    symbol: str
    name: str
    image: Optional[str] = None
    market_cap_rank: Optional[int] = None
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    price_change_24h: Optional[float] = None
    price_change_7d: Optional[float] = None
    price_change_30d: Optional[float] = None
    exchange_prices: List[PricePoint] = Field(default_factory=list)
    last_updated: Optional[datetime] = None


class HistoricalPoint(FrozenModel):
    """Single (timestamp, price) observation; timestamp in epoch milliseconds."""
    timestamp: int
    price: float


class ExchangeInfo(FrozenModel):
    id: str
    name: str
    url: Optional[str] = None
    image: Optional[str] = None
    trust_score: Optional[float] = None
    trust_score_rank: Optional[int] = None
    trade_volume_24h_btc: Optional[float] = None


class PriceExtreme(FrozenModel):
    price: float = 0.0
    exchange: str = "Unknown"


class PriceComparison(FrozenModel):
    """Spread between the cheapest and dearest quote."""
    lowest: PriceExtreme = PriceExtreme()
    highest: PriceExtreme = PriceExtreme()
    difference: float = 0.0
    difference_percentage: float = 0.0


class MarketComparison(FrozenModel):
    """Cross-exchange view of one coin, quotes sorted ascending by price."""
    id: str
    symbol: str
    name: str
    exchanges: List[PricePoint]
    price_comparison: PriceComparison
    last_updated: datetime


class ArbitrageOpportunity(FrozenModel):
    id: str
    symbol: str
    name: str
    difference_percentage: float
    buy_from: PriceExtreme
    sell_at: PriceExtreme
    potential_profit_per_unit: float

    @classmethod
    def from_comparison(cls, comparison: MarketComparison) -> "ArbitrageOpportunity":
        pc = comparison.price_comparison
        return cls(
            id=comparison.id,
            symbol=comparison.symbol,
            name=comparison.name,
            difference_percentage=pc.difference_percentage,
            buy_from=pc.lowest,
            sell_at=pc.highest,
            potential_profit_per_unit=pc.difference,
        )
