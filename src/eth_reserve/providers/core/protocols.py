"""Capability protocols consumed by the reconciliation pipeline."""
from typing import Protocol

from eth_reserve.schemas import AlertEvent, CryptoInfo, EquityInfo


class EquityInfoResolver(Protocol):
    """Resolves market cap and shares outstanding for a listed company."""

    async def get_equity_info(self, ticker: str) -> EquityInfo:
        ...


class CryptoInfoResolver(Protocol):
    """Resolves market cap and price for a crypto asset."""

    async def get_crypto_info(self, symbol: str) -> CryptoInfo:
        ...


class PriceResolver(Protocol):
    """Resolves the ETH/USD price. Raises PriceUnavailableError on failure."""

    async def get_eth_usd_price(self) -> float:
        ...


class BalanceResolver(Protocol):
    """Resolves the total ETH-equivalent balance of an address, in wei."""

    async def get_balance_wei(self, address: str) -> int:
        ...


class ChangeNotifier(Protocol):
    """Delivers a reserve change alert."""

    async def send_change_alert(self, event: AlertEvent) -> None:
        ...
