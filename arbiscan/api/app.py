"""
ArbiScan — FastAPI Application
Price listing, coin detail, history, exchange directory, cross-exchange
comparison and arbitrage endpoints, plus /health.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from arbiscan.api.responses import api_response, register_exception_handlers
from arbiscan.api.services import Services, build_services
from arbiscan.config.settings import get_settings
from arbiscan.utils.helpers import utc_timestamp
from arbiscan.utils.logger import get_logger, setup_logging

logger = get_logger("api")


def get_services(request: Request) -> Services:
    return request.app.state.services


def create_app(services: Optional[Services] = None) -> FastAPI:
    """Build the application; pass `services` to run against pre-built components."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan — startup and shutdown."""
        setup_logging()
        owned = getattr(app.state, "services", None) is None
        if owned:
            app.state.services = build_services(settings)
        logger.info("arbiscan_ready", version=settings.version, port=settings.port)

        yield

        logger.info("arbiscan_shutting_down")
        if owned:
            await app.state.services.shutdown()
            app.state.services = None

    app = FastAPI(
        title=settings.app_name,
        description="Cross-exchange cryptocurrency price comparison and arbitrage scanner",
        version=settings.version,
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services
    register_exception_handlers(app)

    # ─── Health ─────────────────────────────────────────────────

    @app.get("/health", tags=["System"])
    async def health_check():
        return JSONResponse(
            status_code=200,
            content={"status": "OK", "timestamp": utc_timestamp()},
        )

    # ─── Prices ─────────────────────────────────────────────────

    @app.get("/api/prices", tags=["Prices"])
    async def list_prices(services: Services = Depends(get_services)):
        data = await services.coingecko.fetch_markets()
        return api_response(200, "Cryptocurrency prices retrieved successfully", data)

    @app.get("/api/prices/aggregated", tags=["Prices"])
    async def aggregated_prices(services: Services = Depends(get_services)):
        data = await services.aggregator.aggregate_prices()
        return api_response(200, "Aggregated prices retrieved successfully", data)

    @app.get("/api/prices/historical/{coin_id}", tags=["Prices"])
    async def historical_prices(
        coin_id: str,
        days: int = Query(default=settings.market.default_history_days, ge=1),
        services: Services = Depends(get_services),
    ):
        data = await services.coingecko.fetch_historical(coin_id, days)
        return api_response(200, f"Historical data for {coin_id} retrieved successfully", data)

    @app.get("/api/prices/{coin_id}", tags=["Prices"])
    async def coin_price(coin_id: str, services: Services = Depends(get_services)):
        data = await services.coingecko.fetch_coin_detail(coin_id)
        return api_response(200, f"Price data for {data.name} retrieved successfully", data)

    # ─── Exchanges ──────────────────────────────────────────────

    @app.get("/api/exchanges", tags=["Exchanges"])
    async def list_exchanges(services: Services = Depends(get_services)):
        data = await services.coingecko.fetch_exchanges()
        return api_response(200, "Exchanges retrieved successfully", data)

    # ─── Markets & Arbitrage ────────────────────────────────────

    @app.get("/api/markets/{coin_id}", tags=["Markets"])
    async def market_comparison(
        coin_id: str,
        symbol: Optional[str] = Query(default=None),
        services: Services = Depends(get_services),
    ):
        # Without an explicit symbol, guess it from the coin id
        data = await services.aggregator.compare_market(coin_id, symbol or coin_id[:3])
        return api_response(200, f"Market comparison for {data.name} retrieved successfully", data)

    @app.get("/api/arbitrage", tags=["Markets"])
    async def arbitrage_opportunities(
        min_percentage: float = Query(
            default=settings.market.min_arbitrage_percentage, alias="minPercentage", ge=0
        ),
        services: Services = Depends(get_services),
    ):
        data = await services.aggregator.find_arbitrage_opportunities(min_percentage)
        return api_response(200, f"Found {len(data)} arbitrage opportunities", data)

    return app


app = create_app()
