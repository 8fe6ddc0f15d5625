"""Abstract base class for stock market data providers."""
from abc import abstractmethod

from eth_reserve.providers.core import ProviderABC
from eth_reserve.schemas import EquityInfo


class StocksProviderABC(ProviderABC):
    """Base interface for stock market data providers."""

    @abstractmethod
    async def get_equity_info(self, ticker: str) -> EquityInfo:
        """Fetch market cap and shares outstanding for a ticker.

        Raises ValueError when the provider cannot be reached or parsed.
        """
