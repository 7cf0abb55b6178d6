"""
ArbiScan — Base Exchange Adapter Interface
All upstream adapters implement this interface. Adapters propagate typed
failures and never substitute default data.
"""
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from arbiscan.config.settings import MarketSettings
from arbiscan.data.cache.price_cache import PriceCache
from arbiscan.data.models import DataSource, HistoricalPoint, PricePoint
from arbiscan.data.transport import HttpTransport
from arbiscan.utils.exceptions import ParseError, ValidationError
from arbiscan.utils.logger import get_logger

logger = get_logger("adapters")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseExchangeAdapter(ABC):
    """Abstract base class for all exchange data adapters."""

    source: DataSource
    name: str

    def __init__(
        self,
        base_url: str,
        transport: HttpTransport,
        cache: PriceCache,
        settings: MarketSettings,
    ):
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self.cache = cache
        self.settings = settings

    @abstractmethod
    async def fetch_all_prices(self) -> List[PricePoint]:
        """Fetch quotes for the supported-coin universe."""
        pass

    @abstractmethod
    async def fetch_historical(self, ref: str, days: int = 7) -> List[HistoricalPoint]:
        """Fetch a chronological price series covering the last `days` days."""
        pass

    def _cache_key(self, suffix: str) -> str:
        return f"{self.source.value}:{suffix}"

    async def _cached(self, suffix: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for `suffix`, loading and storing it on a miss."""
        key = self._cache_key(suffix)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        value = await loader()
        self.cache.set(key, value)
        logger.debug("cache_filled", key=key)
        return value

    async def _get(self, path: str, params: dict = None) -> Any:
        return await self.transport.get_json(f"{self.base_url}{path}", params=params)

    def _parse(self, schema: Type[SchemaT], payload: Any) -> SchemaT:
        try:
            return schema.model_validate(payload)
        except SchemaValidationError as e:
            logger.warning("upstream_schema_mismatch", source=self.source.value,
                           schema=schema.__name__, errors=e.error_count())
            raise ParseError(f"Unexpected {self.name} response: {e.error_count()} invalid field(s)") from e

    def _parse_list(self, schema: Type[SchemaT], payload: Any) -> List[SchemaT]:
        try:
            return TypeAdapter(List[schema]).validate_python(payload)
        except SchemaValidationError as e:
            logger.warning("upstream_schema_mismatch", source=self.source.value,
                           schema=schema.__name__, errors=e.error_count())
            raise ParseError(f"Unexpected {self.name} response: {e.error_count()} invalid field(s)") from e

    @staticmethod
    def _validate_days(days: int) -> int:
        if days < 1:
            raise ValidationError(f"days must be a positive integer, got {days}")
        return days
