"""External data providers consumed by the reconciliation pipeline.

- YFinanceProvider: market cap and shares outstanding for listed companies
- CoinGeckoProvider: crypto market cap and the ETH/USD price
- AlchemyBalanceProvider: wallet balances across EVM networks and validators
- ResendNotifier: reserve change alerts by email

Each provider owns its network client and is closed on shutdown:

    async with CoinGeckoProvider() as provider:
        price = await provider.get_eth_usd_price()
"""
from eth_reserve.providers.chain import (AlchemyBalanceProvider,
                                         BalanceProviderABC)
from eth_reserve.providers.core import ErrorMapper, ProviderABC
from eth_reserve.providers.crypto import CoinGeckoProvider, CryptoProviderABC
from eth_reserve.providers.notifications import NotifierABC, ResendNotifier
from eth_reserve.providers.stocks import StocksProviderABC, YFinanceProvider

__all__ = [
    "AlchemyBalanceProvider",
    "BalanceProviderABC",
    "CoinGeckoProvider",
    "CryptoProviderABC",
    "ErrorMapper",
    "NotifierABC",
    "ProviderABC",
    "ResendNotifier",
    "StocksProviderABC",
    "YFinanceProvider",
]
