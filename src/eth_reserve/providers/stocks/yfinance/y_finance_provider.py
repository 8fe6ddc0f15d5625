"""Yahoo Finance market data provider for listed companies."""
import asyncio
import logging

import yfinance as yf

from eth_reserve.providers.core.utils import (normalize_stock_symbol,
                                              positive_number)
from eth_reserve.providers.stocks.stocks_provider_abc import StocksProviderABC
from eth_reserve.providers.stocks.yfinance.models import YFinanceFundamentals
from eth_reserve.schemas import EquityInfo

logger = logging.getLogger(__name__)


class YFinanceProvider(StocksProviderABC):
    """Market data provider for stocks via Yahoo Finance.

    Uses yfinance library for market cap and shares outstanding.
    No API key required. yfinance is blocking, so lookups run in a thread.
    """

    name = "yfinance"

    def _extract_fundamentals(self, ticker: yf.Ticker) -> YFinanceFundamentals:
        """Read market cap and shares from fast_info, falling back to the full info dict."""
        fast = getattr(ticker, "fast_info", None)
        market_cap = shares = None
        if fast:
            market_cap = positive_number(fast.get("marketCap"))
            shares = positive_number(fast.get("shares"))
        if market_cap is None or shares is None:
            full = ticker.info or {}
            market_cap = market_cap or positive_number(full.get("marketCap"))
            shares = shares or positive_number(full.get("sharesOutstanding"))
        return YFinanceFundamentals(market_cap=market_cap, shares_outstanding=shares)

    def _fetch_equity_sync(self, symbol: str) -> EquityInfo:
        """Fetch fundamentals synchronously (run in thread)."""
        try:
            data = self._extract_fundamentals(yf.Ticker(symbol))
        except Exception as e:
            raise ValueError(f"Failed to fetch company info for '{symbol}': {e}") from e
        if data.market_cap is None:
            logger.warning("No market cap data found for ticker %s", symbol)
        if data.shares_outstanding is None:
            logger.warning("No shares outstanding data found for ticker %s", symbol)
        return EquityInfo(
            market_cap=data.market_cap, shares_outstanding=data.shares_outstanding
        )

    async def get_equity_info(self, ticker: str) -> EquityInfo:
        """Fetch market cap and shares outstanding for a stock ticker."""
        sym = normalize_stock_symbol(ticker)
        return await asyncio.to_thread(self._fetch_equity_sync, sym)
