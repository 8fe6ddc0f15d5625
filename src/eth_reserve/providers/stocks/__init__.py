"""Stock market data providers."""
from eth_reserve.providers.stocks.stocks_provider_abc import StocksProviderABC
from eth_reserve.providers.stocks.yfinance.y_finance_provider import \
    YFinanceProvider

__all__ = ["StocksProviderABC", "YFinanceProvider"]
