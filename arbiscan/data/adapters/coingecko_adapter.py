"""
ArbiScan — CoinGecko Data Adapter
Rich metadata source: coin universe, per-coin detail with an embedded
multi-exchange ticker listing, exchange directory and price history.
"""
from typing import List, Optional

from arbiscan.data.adapters.base import BaseExchangeAdapter
from arbiscan.data.adapters.schemas import (
    CoinGeckoCoin,
    CoinGeckoExchangeRow,
    CoinGeckoMarketChart,
    CoinGeckoMarketRow,
    CoinGeckoTicker,
)
from arbiscan.data.models import (
    CoinMarket,
    CoinSnapshot,
    DataSource,
    ExchangeInfo,
    HistoricalPoint,
    PricePoint,
)
from arbiscan.utils.exceptions import ValidationError
from arbiscan.utils.helpers import utc_now
from arbiscan.utils.logger import get_logger

logger = get_logger("coingecko_adapter")


class CoinGeckoAdapter(BaseExchangeAdapter):
    """CoinGecko adapter — the rich source for all comparisons."""

    source = DataSource.COINGECKO
    name = "CoinGecko"

    async def fetch_markets(self) -> List[CoinMarket]:
        """Bulk listing of the supported coins, ordered by market cap."""

        async def load() -> List[CoinMarket]:
            params = {
                "vs_currency": self.settings.vs_currency,
                "ids": ",".join(self.settings.supported_coins),
                "order": "market_cap_desc",
                "per_page": self.settings.markets_page_size,
                "page": 1,
                "sparkline": "false",
                "price_change_percentage": "24h",
            }
            rows = self._parse_list(CoinGeckoMarketRow, await self._get("/coins/markets", params))
            markets = [
                CoinMarket(
                    id=row.id,
                    symbol=(row.symbol or "").upper(),
                    name=row.name or row.id,
                    image=row.image,
                    current_price=row.current_price,
                    market_cap=row.market_cap,
                    market_cap_rank=row.market_cap_rank,
                    total_volume=row.total_volume,
                    price_change_24h=row.price_change_percentage_24h,
                    last_updated=row.last_updated,
                )
                for row in rows
            ]
            logger.info("coingecko_markets_fetched", count=len(markets))
            return markets

        return await self._cached("markets", load)

    async def fetch_all_prices(self) -> List[PricePoint]:
        """Aggregate CoinGecko price of every supported coin as PricePoints."""
        markets = await self.fetch_markets()
        fetched_at = utc_now()
        quote = self.settings.vs_currency.upper()
        points = []
        for coin in markets:
            if not coin.symbol or not coin.current_price or coin.current_price <= 0:
                continue
            points.append(
                PricePoint(
                    symbol=coin.symbol,
                    exchange=self.name,
                    pair=f"{coin.symbol}/{quote}",
                    price=coin.current_price,
                    volume_24h=coin.total_volume,
                    last_updated=coin.last_updated or fetched_at,
                )
            )
        return points

    async def fetch_coin_detail(self, coin_id: str) -> CoinSnapshot:
        """
        Full metadata for one coin. The embedded ticker listing is truncated
        to the first N entries in upstream order; quotes without a positive
        price are then dropped.
        """
        coin_id = coin_id.strip().lower()
        if not coin_id:
            raise ValidationError("coin_id must not be empty")

        async def load() -> CoinSnapshot:
            params = {
                "localization": "false",
                "tickers": "true",
                "market_data": "true",
                "community_data": "false",
                "developer_data": "false",
            }
            coin = self._parse(CoinGeckoCoin, await self._get(f"/coins/{coin_id}", params))
            symbol = coin.symbol.upper()
            fetched_at = utc_now()
            tickers = coin.tickers[: self.settings.max_exchanges_per_coin]
            exchange_prices = [
                point for point in (self._ticker_to_point(symbol, t, fetched_at) for t in tickers)
                if point is not None
            ]

            vs = self.settings.vs_currency
            md = coin.market_data
            return CoinSnapshot(
                id=coin.id,
                symbol=symbol,
                name=coin.name,
                image=coin.image.large if coin.image else None,
                market_cap_rank=coin.market_cap_rank,
                current_price=md.current_price.get(vs),
                market_cap=md.market_cap.get(vs),
                total_volume=md.total_volume.get(vs),
                high_24h=md.high_24h.get(vs),
                low_24h=md.low_24h.get(vs),
                price_change_24h=md.price_change_percentage_24h,
                price_change_7d=md.price_change_percentage_7d,
                price_change_30d=md.price_change_percentage_30d,
                exchange_prices=exchange_prices,
                last_updated=coin.last_updated,
            )

        return await self._cached(f"coin_{coin_id}", load)

    def _ticker_to_point(self, symbol: str, ticker: CoinGeckoTicker, fetched_at) -> Optional[PricePoint]:
        # Prefer the USD-converted quote so non-USD pairs are comparable
        price = ticker.converted_last.get(self.settings.vs_currency) or ticker.last
        if price is None or price <= 0:
            logger.debug("coingecko_ticker_without_price", symbol=symbol, exchange=ticker.market.name)
            return None
        return PricePoint(
            symbol=symbol,
            exchange=ticker.market.name,
            pair=f"{ticker.base}/{ticker.target}",
            price=price,
            volume_24h=ticker.volume if ticker.volume is not None and ticker.volume >= 0 else None,
            trust_score=ticker.trust_score,
            last_updated=ticker.timestamp or fetched_at,
        )

    async def fetch_exchanges(self) -> List[ExchangeInfo]:
        """Top-K exchanges from the CoinGecko exchange directory."""

        async def load() -> List[ExchangeInfo]:
            payload = await self._get("/exchanges")
            if isinstance(payload, list):
                payload = payload[: self.settings.max_exchange_listing]
            rows = self._parse_list(CoinGeckoExchangeRow, payload)
            return [ExchangeInfo(**row.model_dump()) for row in rows]

        return await self._cached("exchanges", load)

    async def fetch_historical(self, coin_id: str, days: int = 7) -> List[HistoricalPoint]:
        """Market chart prices for the last `days` days, upstream order."""
        coin_id = coin_id.strip().lower()
        if not coin_id:
            raise ValidationError("coin_id must not be empty")
        days = self._validate_days(days)

        async def load() -> List[HistoricalPoint]:
            params = {"vs_currency": self.settings.vs_currency, "days": days}
            chart = self._parse(
                CoinGeckoMarketChart, await self._get(f"/coins/{coin_id}/market_chart", params)
            )
            return [HistoricalPoint(timestamp=int(ts), price=price) for ts, price in chart.prices]

        return await self._cached(f"historical_{coin_id}_{days}", load)
