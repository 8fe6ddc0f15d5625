"""Abstract base class for cryptocurrency data providers."""
from abc import abstractmethod

from eth_reserve.providers.core import ProviderABC
from eth_reserve.schemas import CryptoInfo


class CryptoProviderABC(ProviderABC):
    """Base interface for cryptocurrency market data providers.

    Subclasses serve both crypto enrichment and the ETH/USD price used to
    value the aggregate snapshot.
    """

    @abstractmethod
    async def get_crypto_info(self, symbol: str) -> CryptoInfo:
        """Fetch market cap and price for a crypto asset."""

    @abstractmethod
    async def get_eth_usd_price(self) -> float:
        """Fetch the current ETH/USD price. Raises PriceUnavailableError."""
