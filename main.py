"""
ArbiScan — Main Entry Point
Runs the price aggregation and arbitrage API.
"""
import uvicorn
from arbiscan.config.settings import get_settings
from arbiscan.utils.logger import setup_logging, get_logger

logger = get_logger("main")


def run_api():
    """Run the FastAPI application."""
    settings = get_settings()
    setup_logging()
    logger.info("starting_arbiscan", version=settings.version, port=settings.port)
    uvicorn.run(
        "arbiscan.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run_api()
