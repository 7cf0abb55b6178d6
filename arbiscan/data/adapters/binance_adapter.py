"""
ArbiScan — Binance Data Adapter
Spot source: one authoritative ticker per symbol, used as a cross-check
against the rich source's exchange listing.
"""
from datetime import datetime, timezone
from typing import List

from arbiscan.data.adapters.base import BaseExchangeAdapter
from arbiscan.data.adapters.schemas import BinanceTicker24h, BinanceTickerPrice
from arbiscan.data.models import DataSource, HistoricalPoint, PricePoint
from arbiscan.utils.exceptions import NotFoundError, ParseError, UpstreamError, ValidationError
from arbiscan.utils.helpers import symbol_prefix, utc_now
from arbiscan.utils.logger import get_logger

logger = get_logger("binance_adapter")

# Binance error code for an unknown trading pair
INVALID_SYMBOL_CODE = -1121
MAX_KLINES = 1000


class BinanceAdapter(BaseExchangeAdapter):
    """Binance spot adapter."""

    source = DataSource.BINANCE
    name = "Binance"

    @property
    def quote_asset(self) -> str:
        return self.settings.quote_asset.upper()

    def _is_relevant_pair(self, pair: str) -> bool:
        """
        Loose match of a flat pair list against the supported coin ids: the
        pair must be quoted in the quote asset and its first three characters
        must match the first three of some supported coin id. This is not an
        exact symbol match: coins sharing a prefix collide, and coins whose
        ticker differs from their id (bitcoin/BTC) are missed.
        """
        if not pair.endswith(self.quote_asset) or len(pair) <= len(self.quote_asset):
            return False
        prefix = symbol_prefix(pair)
        return any(symbol_prefix(coin) == prefix for coin in self.settings.supported_coins)

    async def fetch_all_prices(self) -> List[PricePoint]:
        """Latest prices of all quote-asset pairs matching the supported coins."""

        async def load() -> List[PricePoint]:
            tickers = self._parse_list(BinanceTickerPrice, await self._get("/ticker/price"))
            fetched_at = utc_now()
            points = []
            for ticker in tickers:
                pair = ticker.symbol.upper()
                if not self._is_relevant_pair(pair) or ticker.price <= 0:
                    continue
                base = pair[: -len(self.quote_asset)]
                points.append(
                    PricePoint(
                        symbol=base,
                        exchange=self.name,
                        pair=f"{base}/{self.quote_asset}",
                        price=ticker.price,
                        last_updated=fetched_at,
                    )
                )
            logger.info("binance_prices_fetched", total=len(tickers), relevant=len(points))
            return points

        return await self._cached("prices", load)

    async def fetch_coin_ticker(self, symbol: str) -> PricePoint:
        """24h ticker for `symbol` quoted in the configured quote asset."""
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValidationError("symbol must not be empty")
        pair = f"{symbol}{self.quote_asset}"

        async def load() -> PricePoint:
            try:
                payload = await self._get("/ticker/24hr", {"symbol": pair})
            except UpstreamError as e:
                if e.api_code == INVALID_SYMBOL_CODE:
                    raise NotFoundError(f"Trading pair {pair} not found on {self.name}") from e
                raise
            ticker = self._parse(BinanceTicker24h, payload)
            if ticker.lastPrice <= 0:
                raise ParseError(f"{self.name} returned a non-positive price for {pair}")
            last_updated = (
                datetime.fromtimestamp(ticker.closeTime / 1000, tz=timezone.utc)
                if ticker.closeTime else utc_now()
            )
            return PricePoint(
                symbol=symbol,
                exchange=self.name,
                pair=f"{symbol}/{self.quote_asset}",
                price=ticker.lastPrice,
                volume_24h=ticker.volume,
                last_updated=last_updated,
            )

        return await self._cached(f"ticker_{symbol}", load)

    async def fetch_historical(self, symbol: str, days: int = 7) -> List[HistoricalPoint]:
        """Hourly close prices for the last `days` days, oldest first."""
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValidationError("symbol must not be empty")
        days = self._validate_days(days)
        pair = f"{symbol}{self.quote_asset}"

        async def load() -> List[HistoricalPoint]:
            params = {"symbol": pair, "interval": "1h", "limit": min(days * 24, MAX_KLINES)}
            try:
                klines = await self._get("/klines", params)
            except UpstreamError as e:
                if e.api_code == INVALID_SYMBOL_CODE:
                    raise NotFoundError(f"Trading pair {pair} not found on {self.name}") from e
                raise
            if not isinstance(klines, list):
                raise ParseError(f"Unexpected {self.name} klines response")
            try:
                # [open_time, open, high, low, close, volume, close_time, ...]
                return [HistoricalPoint(timestamp=int(k[0]), price=float(k[4])) for k in klines]
            except (TypeError, ValueError, IndexError) as e:
                raise ParseError(f"Malformed {self.name} kline for {pair}") from e

        return await self._cached(f"historical_{symbol}_{days}", load)
