"""
ArbiScan — Common Utility Functions
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Return current UTC timestamp as ISO string."""
    return utc_now().isoformat()


def spread_pct(low: float, high: float) -> float:
    """Percentage spread of high over low, 0 when low is not positive."""
    if low <= 0:
        return 0.0
    return (high - low) / low * 100.0


def symbol_prefix(value: str, length: int = 3) -> str:
    """Lower-cased leading characters used for loose symbol matching."""
    return value[:length].lower()
