"""Core provider abstractions."""
from eth_reserve.providers.core.error_mapper import ErrorMapper
from eth_reserve.providers.core.provider_abc import ProviderABC
from eth_reserve.providers.core.protocols import (BalanceResolver,
                                                  ChangeNotifier,
                                                  CryptoInfoResolver,
                                                  EquityInfoResolver,
                                                  PriceResolver)
from eth_reserve.providers.core.utils import round2, wei_to_eth

__all__ = [
    "BalanceResolver",
    "ChangeNotifier",
    "CryptoInfoResolver",
    "EquityInfoResolver",
    "ErrorMapper",
    "PriceResolver",
    "ProviderABC",
    "round2",
    "wei_to_eth",
]
