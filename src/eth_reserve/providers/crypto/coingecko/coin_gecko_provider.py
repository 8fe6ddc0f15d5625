"""CoinGecko market data provider for cryptocurrencies and the ETH/USD price."""
import logging
import math
import os

import httpx

from eth_reserve.exceptions import PriceUnavailableError
from eth_reserve.providers.core.utils import normalize_crypto_symbol, positive_number
from eth_reserve.providers.crypto.coingecko.models import (
    CoinGeckoPriceRow, CoinGeckoSimplePriceParams)
from eth_reserve.providers.crypto.crypto_provider_abc import CryptoProviderABC
from eth_reserve.schemas import CryptoInfo

logger = logging.getLogger(__name__)


class CoinGeckoProvider(CryptoProviderABC):
    """Market data provider for cryptocurrencies via CoinGecko API.

    Company tickers are looked up as symbols (e.g., "ENA", "ETHFI"); when a symbol
    is shared, CoinGecko answers with the highest market cap coin.
    Also serves as the ETH/USD price source for daily snapshots.
    """

    name = "coingecko"
    BASE_URL = "https://api.coingecko.com/api/v3"
    PRO_BASE_URL = "https://pro-api.coingecko.com/api/v3"
    ETH_ID = "ethereum"

    def __init__(
        self,
        api_key: str | None = None,
        use_pro_api: bool = False,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the CoinGecko provider.

        Args:
            api_key: CoinGecko API key. Defaults to COINGECKO_API_KEY env var.
            use_pro_api: Whether to use the Pro API endpoint.
            timeout: Per-request timeout in seconds.
            client: Preconfigured client (tests inject one with a mock transport).
        """
        self._api_key = api_key or os.getenv("COINGECKO_API_KEY")
        self._use_pro_api = use_pro_api or bool(self._api_key)

        headers: dict[str, str] = {"Accept": "application/json"}
        if self._api_key:
            headers["x-cg-pro-api-key"] = self._api_key

        base = self.PRO_BASE_URL if self._use_pro_api else self.BASE_URL
        self._client = client or httpx.AsyncClient(
            base_url=base, headers=headers, timeout=timeout
        )

    async def _simple_price(self, key: str, *, by: str = "ids") -> CoinGeckoPriceRow | None:
        """One /simple/price row, looked up by CoinGecko id (`ids`) or ticker (`symbols`)."""
        params = CoinGeckoSimplePriceParams().model_dump() | {by: key}
        response = await self._client.get("/simple/price", params=params)
        response.raise_for_status()
        row = response.json().get(key)
        return CoinGeckoPriceRow.model_validate(row) if row else None

    async def get_crypto_info(self, symbol: str) -> CryptoInfo:
        """Fetch market cap and price for a coin.

        Args:
            symbol: Ticker symbol, case-insensitive (e.g., "ENA").

        Returns:
            CryptoInfo; fields are None when CoinGecko has no data for them.
        """
        sym = normalize_crypto_symbol(symbol)
        row = await self._simple_price(sym, by="symbols")
        if row is None:
            logger.warning("No CoinGecko data found for symbol %s", sym)
            return CryptoInfo()
        info = CryptoInfo(
            market_cap=positive_number(row.usd_market_cap),
            price=positive_number(row.usd),
        )
        if info.market_cap is None:
            logger.warning("No market cap data found for crypto %s", sym)
        return info

    async def get_eth_usd_price(self) -> float:
        """Fetch the ETH/USD price, floored to whole dollars.

        Raises:
            PriceUnavailableError: the request failed or returned no usable price.
        """
        try:
            row = await self._simple_price(self.ETH_ID)
        except httpx.HTTPError as exc:
            raise PriceUnavailableError(f"Failed fetching ETH price: {exc}") from exc
        price = positive_number(row.usd) if row else None
        if price is None:
            raise PriceUnavailableError("CoinGecko returned no ETH price")
        return float(math.floor(price))

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
