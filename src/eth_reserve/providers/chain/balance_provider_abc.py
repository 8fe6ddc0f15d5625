"""Abstract base class for on-chain balance providers."""
from abc import abstractmethod

from eth_reserve.providers.core import ProviderABC


class BalanceProviderABC(ProviderABC):
    """Base interface for providers resolving an address's ETH-equivalent balance."""

    @abstractmethod
    async def get_balance_wei(self, address: str) -> int:
        """Return the aggregate balance in wei. Raises BalanceUnavailableError."""
