"""Models for YFinance provider."""
from pydantic import BaseModel


class YFinanceFundamentals(BaseModel):
    """Raw market cap and share count as read from a yfinance ticker."""

    market_cap: float | None = None
    shares_outstanding: float | None = None
    provider: str = "yfinance"
