"""
ArbiScan — Response Envelope & Error Mapping
Every response is rendered as {success, message, timestamp, data?}.
"""
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from arbiscan.utils.exceptions import ArbiScanError
from arbiscan.utils.helpers import utc_timestamp
from arbiscan.utils.logger import get_logger

logger = get_logger("api")


def api_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    """Wrap a payload in the standard envelope; `data` is omitted when not given."""
    content = {
        "success": status_code < 400,
        "message": message,
        "timestamp": utc_timestamp(),
    }
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


async def arbiscan_error_handler(request: Request, exc: ArbiScanError) -> JSONResponse:
    logger.warning("request_failed", path=request.url.path,
                   error_type=type(exc).__name__, status=exc.status_code, error=str(exc))
    return api_response(exc.status_code, str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.warning("request_validation_failed", path=request.url.path, details=details)
    return api_response(400, f"Validation Error: {details}")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return api_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    return api_response(500, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ArbiScanError, arbiscan_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
