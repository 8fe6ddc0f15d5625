"""On-chain balance providers."""
from eth_reserve.providers.chain.alchemy.alchemy_provider import \
    AlchemyBalanceProvider
from eth_reserve.providers.chain.balance_provider_abc import \
    BalanceProviderABC

__all__ = ["AlchemyBalanceProvider", "BalanceProviderABC"]
