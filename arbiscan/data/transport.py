"""
ArbiScan — HTTP Transport
Shared aiohttp session used by all adapters. Maps transport failures onto
the typed error taxonomy so adapters only ever see ArbiScanError subclasses.
"""
import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from arbiscan.utils.exceptions import NotFoundError, ParseError, UpstreamError
from arbiscan.utils.logger import get_logger

logger = get_logger("transport")


def _error_details(body: str) -> tuple:
    """Extract (message, api_code, payload) from an error body if it is JSON."""
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        return body[:200], None, None
    if isinstance(payload, dict):
        message = payload.get("msg") or payload.get("error") or payload.get("message") or body[:200]
        api_code = payload.get("code") if isinstance(payload.get("code"), int) else None
        return str(message), api_code, payload
    return body[:200], None, payload


class HttpTransport:
    """Fetch JSON for a URL and query parameters."""

    def __init__(self, timeout_seconds: float = 10.0):
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def connect(self) -> None:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)
        logger.info("http_transport_connected", timeout=self.timeout_seconds)

    async def disconnect(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None
        logger.info("http_transport_disconnected")

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if not self._session:
            await self.connect()

        try:
            async with self._session.get(url, params=params) as resp:
                raw = await resp.read()
                status = resp.status
        except asyncio.TimeoutError as e:
            logger.warning("upstream_timeout", url=url)
            raise UpstreamError(f"Timed out requesting {url}") from e
        except aiohttp.ClientError as e:
            logger.warning("upstream_connection_error", url=url, error=str(e))
            raise UpstreamError(f"Failed to reach {url}: {e}") from e

        if status >= 400:
            message, api_code, payload = _error_details(raw.decode("utf-8", errors="replace"))
            logger.warning("upstream_error_status", url=url, status=status, api_code=api_code)
            if status == 404:
                raise NotFoundError(message)
            raise UpstreamError(message, status=status, api_code=api_code, payload=payload)

        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}") from e
