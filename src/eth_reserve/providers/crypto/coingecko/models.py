"""Models for CoinGecko provider (API params and response rows)."""
from pydantic import BaseModel


class CoinGeckoSimplePriceParams(BaseModel):
    """Params for /simple/price. Merge with 'ids' or 'symbols' at call site."""

    vs_currencies: str = "usd"
    include_market_cap: str = "true"
    include_last_updated_at: str = "true"


class CoinGeckoPriceRow(BaseModel):
    """One coin entry of a /simple/price response."""

    usd: float | None = None
    usd_market_cap: float | None = None
    last_updated_at: int | None = None
