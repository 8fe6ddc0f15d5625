"""Shared utilities for providers and reconciliation math."""

DECIMALS = 2
WEI_PER_ETH = 10**18
GWEI = 10**9


def normalize_stock_symbol(symbol: str) -> str:
    """Normalize a stock symbol (uppercase)."""
    return symbol.strip().upper()


def normalize_crypto_symbol(symbol: str) -> str:
    """Normalize a crypto ticker for CoinGecko `symbols` lookups (lowercase)."""
    return symbol.strip().lower()


def round2(x: float | None) -> float | None:
    """Round a value to 2 decimal places; preserve None."""
    if x is None:
        return None
    return round(float(x), DECIMALS)


def wei_to_eth(wei: int, digits: int = 4) -> float:
    """Convert wei to ETH, rounded to `digits` decimals."""
    return round(wei / WEI_PER_ETH, digits)


def positive_number(value: object) -> float | None:
    """Return value as float when it is a positive number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None
