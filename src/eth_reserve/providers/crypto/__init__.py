"""Cryptocurrency market data providers."""
from eth_reserve.providers.crypto.coingecko.coin_gecko_provider import \
    CoinGeckoProvider
from eth_reserve.providers.crypto.crypto_provider_abc import CryptoProviderABC

__all__ = ["CryptoProviderABC", "CoinGeckoProvider"]
