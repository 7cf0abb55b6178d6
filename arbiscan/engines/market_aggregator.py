"""
ArbiScan — Market Aggregation & Arbitrage Engine
Merges the rich source's exchange listing with the spot source's ticker,
ranks quotes by price and scans the coin universe for price spreads.

Failure semantics differ by operation on purpose:
  * compare_market tolerates a spot-source failure (the spot quote is
    dropped) but propagates any rich-source failure unchanged.
  * find_arbitrage_opportunities skips coins whose comparison fails or
    times out.
  * aggregate_prices fails as a whole if any single source fails.
"""
import asyncio
from typing import Dict, List, Optional, Sequence

from arbiscan.config.settings import MarketSettings
from arbiscan.data.adapters.base import BaseExchangeAdapter
from arbiscan.data.adapters.binance_adapter import BinanceAdapter
from arbiscan.data.adapters.coingecko_adapter import CoinGeckoAdapter
from arbiscan.data.models import (
    ArbitrageOpportunity,
    CoinMarket,
    MarketComparison,
    PriceComparison,
    PriceExtreme,
    PricePoint,
)
from arbiscan.utils.exceptions import ValidationError
from arbiscan.utils.helpers import spread_pct, utc_now
from arbiscan.utils.logger import get_logger

logger = get_logger("market_aggregator")


def summarize_prices(points: Sequence[PricePoint]) -> PriceComparison:
    """Spread between the first and last quote of an ascending list."""
    if not points:
        return PriceComparison()
    lowest, highest = points[0], points[-1]
    return PriceComparison(
        lowest=PriceExtreme(price=lowest.price, exchange=lowest.exchange),
        highest=PriceExtreme(price=highest.price, exchange=highest.exchange),
        difference=highest.price - lowest.price,
        difference_percentage=round(spread_pct(lowest.price, highest.price), 2),
    )


class MarketAggregator:
    """Cross-exchange comparison and arbitrage detection."""

    def __init__(
        self,
        rich: CoinGeckoAdapter,
        spot: BinanceAdapter,
        settings: MarketSettings,
    ):
        self.rich = rich
        self.spot = spot
        self.settings = settings

    @property
    def adapters(self) -> List[BaseExchangeAdapter]:
        return [self.rich, self.spot]

    async def _spot_quote(self, symbol: str) -> Optional[PricePoint]:
        """Spot ticker, or None if the spot source cannot provide one."""
        try:
            point = await self.spot.fetch_coin_ticker(symbol)
        except Exception as e:
            logger.warning("spot_quote_unavailable", source=self.spot.name, symbol=symbol, error=str(e))
            return None
        return point.model_copy(update={"trust_score": self.settings.spot_trust_score})

    async def compare_market(self, coin_id: str, symbol: str) -> MarketComparison:
        """
        Compare one coin's price across exchanges.

        The rich detail and the spot ticker are fetched concurrently. A rich
        failure propagates with its original error kind; a spot failure only
        drops the spot quote from the result.
        """
        if not coin_id or not coin_id.strip():
            raise ValidationError("coin_id must not be empty")
        if not symbol or not symbol.strip():
            raise ValidationError("symbol must not be empty")

        spot_task = asyncio.ensure_future(self._spot_quote(symbol))
        try:
            detail = await self.rich.fetch_coin_detail(coin_id)
        except BaseException:
            spot_task.cancel()
            raise
        spot_point = await spot_task

        merged = list(detail.exchange_prices)
        if spot_point is not None:
            merged.append(spot_point)
        # sorted() is stable: equal prices keep their listing order
        exchanges = sorted((p for p in merged if p.price > 0), key=lambda p: p.price)

        return MarketComparison(
            id=detail.id,
            symbol=symbol.strip().upper(),
            name=detail.name,
            exchanges=exchanges,
            price_comparison=summarize_prices(exchanges),
            last_updated=utc_now(),
        )

    async def _scan_coin(self, coin: CoinMarket, limiter: asyncio.Semaphore) -> Optional[MarketComparison]:
        async with limiter:
            try:
                return await asyncio.wait_for(
                    self.compare_market(coin.id, coin.symbol),
                    timeout=self.settings.scan_timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.warning("arbitrage_coin_timeout", coin=coin.id,
                               timeout=self.settings.scan_timeout_seconds)
            except Exception as e:
                logger.warning("arbitrage_coin_skipped", coin=coin.id, error=str(e))
        return None

    async def find_arbitrage_opportunities(
        self, min_percentage: Optional[float] = None
    ) -> List[ArbitrageOpportunity]:
        """
        Scan every coin of the universe and return those whose cross-exchange
        spread is at least `min_percentage`, largest spread first.
        """
        threshold = self.settings.min_arbitrage_percentage if min_percentage is None else min_percentage
        if threshold < 0:
            raise ValidationError(f"minPercentage must not be negative, got {threshold}")

        coins = await self.rich.fetch_markets()
        candidates = []
        for coin in coins:
            if not coin.symbol:
                logger.warning("arbitrage_coin_without_symbol", coin=coin.id)
                continue
            candidates.append(coin)

        limiter = asyncio.Semaphore(self.settings.scan_concurrency)
        comparisons = await asyncio.gather(*(self._scan_coin(c, limiter) for c in candidates))

        opportunities = [
            ArbitrageOpportunity.from_comparison(c)
            for c in comparisons
            if c is not None and c.price_comparison.difference_percentage >= threshold
        ]
        # Stable sort keeps universe order among equal spreads
        opportunities.sort(key=lambda o: o.difference_percentage, reverse=True)

        logger.info(
            "arbitrage_scan_complete",
            universe=len(coins),
            scanned=len(candidates),
            failed=sum(1 for c in comparisons if c is None),
            opportunities=len(opportunities),
            threshold=threshold,
        )
        return opportunities

    async def aggregate_prices(self) -> Dict[str, List[PricePoint]]:
        """Raw per-source price lists. Any source failure fails the call."""
        results = await asyncio.gather(*(a.fetch_all_prices() for a in self.adapters))
        return {adapter.source.value: prices for adapter, prices in zip(self.adapters, results)}
