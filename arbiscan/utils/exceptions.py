"""
ArbiScan — Error Taxonomy
Each error kind carries the HTTP status the API renders it with.
"""
from typing import Any, Optional


class ArbiScanError(Exception):
    """Base exception; carries the HTTP status the API renders it with."""
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ArbiScanError):
    """Malformed caller input."""
    status_code = 400


class NotFoundError(ArbiScanError):
    """Requested coin or trading pair is unknown upstream."""
    status_code = 404


class ParseError(ArbiScanError):
    """Upstream payload does not have the expected shape."""
    status_code = 500


class UpstreamError(ArbiScanError):
    """Network failure or non-success status from an upstream API."""
    status_code = 503

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        api_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        self.status = status
        self.api_code = api_code
        self.payload = payload
        super().__init__(message)

    def __str__(self):
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"
