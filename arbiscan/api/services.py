"""
ArbiScan — Service Container
Builds the cache, transport, adapters and aggregator for one process.
Everything is wired explicitly; the container lives on the FastAPI app.
"""
from dataclasses import dataclass

from arbiscan.config.settings import AppSettings
from arbiscan.data.adapters.binance_adapter import BinanceAdapter
from arbiscan.data.adapters.coingecko_adapter import CoinGeckoAdapter
from arbiscan.data.cache.price_cache import PriceCache
from arbiscan.data.transport import HttpTransport
from arbiscan.engines.market_aggregator import MarketAggregator
from arbiscan.utils.logger import get_logger

logger = get_logger("services")


@dataclass
class Services:
    cache: PriceCache
    transport: HttpTransport
    coingecko: CoinGeckoAdapter
    binance: BinanceAdapter
    aggregator: MarketAggregator

    async def shutdown(self) -> None:
        await self.transport.disconnect()
        self.cache.clear()


def build_services(settings: AppSettings) -> Services:
    data = settings.data
    cache = PriceCache(ttl=data.cache_ttl_seconds, maxsize=data.cache_max_entries)
    transport = HttpTransport(timeout_seconds=data.request_timeout_seconds)
    coingecko = CoinGeckoAdapter(data.coingecko_base_url, transport, cache, settings.market)
    binance = BinanceAdapter(data.binance_base_url, transport, cache, settings.market)
    aggregator = MarketAggregator(coingecko, binance, settings.market)
    logger.info(
        "services_built",
        cache_ttl=data.cache_ttl_seconds,
        supported_coins=len(settings.market.supported_coins),
    )
    return Services(cache, transport, coingecko, binance, aggregator)
