"""
ArbiScan — Test Configuration & Fixtures
Shared fixtures for all test modules.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from arbiscan.config.settings import MarketSettings
from arbiscan.data.adapters.binance_adapter import BinanceAdapter
from arbiscan.data.adapters.coingecko_adapter import CoinGeckoAdapter
from arbiscan.data.cache.price_cache import PriceCache
from arbiscan.data.models import CoinMarket, CoinSnapshot, PricePoint

COINGECKO_URL = "https://cg.test/api/v3"
BINANCE_URL = "https://binance.test/api/v3"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """
    Stand-in for HttpTransport. Responses are keyed by full URL; a value may
    be a payload, an exception instance to raise, or a callable of params.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[Tuple[str, Optional[dict]]] = []

    async def get_json(self, url: str, params: Optional[dict] = None) -> Any:
        self.calls.append((url, params))
        if url not in self.routes:
            raise AssertionError(f"unexpected request to {url}")
        response = self.routes[url]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def call_count(self, url: str) -> int:
        return sum(1 for called, _ in self.calls if called == url)

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass


def make_point(exchange: str, price: float, symbol: str = "BTC", **kwargs) -> PricePoint:
    return PricePoint(
        symbol=symbol,
        exchange=exchange,
        pair=kwargs.pop("pair", f"{symbol}/USD"),
        price=price,
        last_updated=kwargs.pop("last_updated", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        **kwargs,
    )


def make_snapshot(coin_id: str, symbol: str, name: str, points: List[PricePoint]) -> CoinSnapshot:
    return CoinSnapshot(id=coin_id, symbol=symbol, name=name, exchange_prices=points)


def make_market(coin_id: str, symbol: str, name: str = "") -> CoinMarket:
    return CoinMarket(id=coin_id, symbol=symbol, name=name or coin_id.title())


@pytest.fixture
def market_settings():
    return MarketSettings(
        supported_coins=["bitcoin", "ethereum", "ripple", "litecoin"],
        quote_asset="USDT",
        vs_currency="usd",
        max_exchanges_per_coin=3,
        max_exchange_listing=2,
        scan_concurrency=2,
        scan_timeout_seconds=0.5,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return PriceCache(ttl=60, timer=clock)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def coingecko(transport, cache, market_settings):
    return CoinGeckoAdapter(COINGECKO_URL, transport, cache, market_settings)


@pytest.fixture
def binance(transport, cache, market_settings):
    return BinanceAdapter(BINANCE_URL, transport, cache, market_settings)


@pytest.fixture
def bitcoin_payload():
    """CoinGecko /coins/bitcoin response trimmed to the fields used."""
    return {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "image": {"large": "https://img.test/btc.png"},
        "market_cap_rank": 1,
        "market_data": {
            "current_price": {"usd": 50200.0, "eur": 46000.0},
            "market_cap": {"usd": 980_000_000_000},
            "total_volume": {"usd": 25_000_000_000},
            "high_24h": {"usd": 51000.0},
            "low_24h": {"usd": 49000.0},
            "price_change_percentage_24h": 1.5,
            "price_change_percentage_7d": -2.0,
            "price_change_percentage_30d": 10.0,
        },
        "tickers": [
            {
                "base": "BTC", "target": "USD",
                "market": {"name": "Kraken", "identifier": "kraken"},
                "last": 50000.0, "volume": 1200.5, "trust_score": "green",
                "timestamp": "2024-01-01T00:00:00+00:00",
            },
            {
                "base": "BTC", "target": "EUR",
                "market": {"name": "Bitstamp", "identifier": "bitstamp"},
                "last": 46100.0, "converted_last": {"usd": 50100.0},
                "volume": 300.0, "trust_score": "yellow",
            },
            {
                "base": "BTC", "target": "USD",
                "market": {"name": "Dead Exchange", "identifier": "dead"},
                "last": 0, "volume": 0, "trust_score": None,
            },
            {
                "base": "BTC", "target": "USD",
                "market": {"name": "Coinbase Exchange", "identifier": "gdax"},
                "last": 50500.0, "volume": 900.0, "trust_score": "green",
            },
        ],
        "last_updated": "2024-01-01T00:00:00.000Z",
    }
