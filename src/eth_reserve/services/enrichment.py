"""Market data enrichment for company snapshots."""
import asyncio
import logging

from eth_reserve.db import Company, CompanyStatus, MarketCapTracking
from eth_reserve.providers.core import CryptoInfoResolver, EquityInfoResolver
from eth_reserve.schemas import Enrichment

logger = logging.getLogger(__name__)


class MarketDataEnricher:
    """Dispatches a company to its market data source and normalizes the result.

    Enrichment never raises: provider errors and timeouts yield an empty
    Enrichment so the snapshot write goes ahead without market data.
    """

    def __init__(
        self,
        equity: EquityInfoResolver,
        crypto: CryptoInfoResolver,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._equity = equity
        self._crypto = crypto
        self._timeout = timeout

    @staticmethod
    def eligible(company: Company) -> bool:
        return (
            company.status == CompanyStatus.ACTIVE
            and bool(company.ticker and company.ticker.strip())
            and company.tracking is not MarketCapTracking.NONE
        )

    async def _fetch(self, tracking: MarketCapTracking, ticker: str) -> Enrichment:
        if tracking is MarketCapTracking.EQUITY:
            info = await self._equity.get_equity_info(ticker)
            return Enrichment(
                market_cap=info.market_cap, shares_outstanding=info.shares_outstanding
            )
        info = await self._crypto.get_crypto_info(ticker)
        return Enrichment(market_cap=info.market_cap)

    async def enrich(self, company: Company) -> Enrichment:
        """Return market data for an eligible company, or an empty Enrichment."""
        if not self.eligible(company):
            return Enrichment()
        tracking = company.tracking
        try:
            return await asyncio.wait_for(
                self._fetch(tracking, company.ticker.strip()), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Market data for %s (%s) timed out after %.1fs",
                company.name, company.ticker, self._timeout,
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to fetch market data for %s (%s)", company.name, company.ticker)
        return Enrichment()
