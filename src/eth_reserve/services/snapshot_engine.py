"""Daily reconciliation of company reserves into per-day snapshots.

A run reconciles every non-inactive company concurrently, then, once all of
them have finished, computes the aggregate snapshot from the company rows
written for the day. Company failures are isolated; a missing ETH/USD price
fails the run after company snapshots are written and before the aggregate.
Session work runs in worker threads, off the event loop.
"""
import asyncio
import logging
from datetime import date, datetime

from eth_reserve.db import AccountingType, Company, store
from eth_reserve.db.sessions import SessionFactory
from eth_reserve.exceptions import CompanyNotFoundError, PriceUnavailableError
from eth_reserve.providers.core import PriceResolver
from eth_reserve.schemas import (AggregateSummary, AlertEvent,
                                 CompanyReconciliation, DailyRunSummary,
                                 Enrichment)
from eth_reserve.services.enrichment import MarketDataEnricher
from eth_reserve.services.rules import Thresholds, pct_change
from eth_reserve.utils import snapshot_day

logger = logging.getLogger(__name__)


def current_reserve(company: Company, wallet_sum: float | None) -> float:
    """Wallet sum for wallet-tracked companies that have wallets, else the manual reserve."""
    if company.accounting_type == AccountingType.WALLET_TRACKING and wallet_sum is not None:
        return wallet_sum
    return company.current_reserve or 0.0


class SnapshotEngine:
    """Computes company and aggregate snapshots for a UTC day."""

    def __init__(
        self,
        session_factory: SessionFactory,
        enricher: MarketDataEnricher,
        price_resolver: PriceResolver,
        *,
        thresholds: Thresholds | None = None,
        price_timeout: float = 10.0,
    ) -> None:
        self._session_factory = session_factory
        self._enricher = enricher
        self._price = price_resolver
        self._thresholds = thresholds or Thresholds()
        self._price_timeout = price_timeout

    def _write_company_snapshot(
        self, company: Company, day: date, reserve: float, enrichment: Enrichment
    ) -> tuple[float, float | None, bool, float | None]:
        """Upsert the day's row. Returns (prev_reserve, total_cost, created, overwritten)."""
        with self._session_factory() as session:
            prev = store.previous_company_snapshot(session, company.id, day)
            prev_reserve = prev.reserve if prev is not None else (company.current_reserve or 0.0)
            total_cost = store.total_purchase_cost(session, company.id)
            _, created, overwritten = store.upsert_company_snapshot(
                session,
                company.id,
                day,
                reserve=reserve,
                pct_diff=pct_change(reserve, prev_reserve),
                market_cap=enrichment.market_cap,
                shares_outstanding=enrichment.shares_outstanding,
                total_cost_accumulated=total_cost,
            )
        return prev_reserve, total_cost, created, overwritten

    async def _reconcile(
        self,
        company: Company,
        day: date,
        wallet_sum: float | None,
        *,
        with_alert: bool,
    ) -> CompanyReconciliation:
        reserve = current_reserve(company, wallet_sum)
        enrichment = await self._enricher.enrich(company)
        prev_reserve, total_cost, created, overwritten = await asyncio.to_thread(
            self._write_company_snapshot, company, day, reserve, enrichment
        )
        diff = reserve - prev_reserve
        pct_diff = pct_change(reserve, prev_reserve)

        logger.debug(
            "Company %s: reserve=%s prev=%s diff=%s pct=%s created=%s",
            company.id, reserve, prev_reserve, diff, pct_diff, created,
        )
        alert = None
        if with_alert and self._thresholds.should_alert(
            created=created,
            overwritten_reserve=overwritten,
            reserve=reserve,
            diff=diff,
            pct_diff=pct_diff,
        ):
            alert = AlertEvent(
                company_id=company.id,
                company_name=company.name,
                pct_diff=pct_diff,
                diff=diff,
                prev_reserve=prev_reserve,
                current_reserve=reserve,
                snapshot_date=day,
            )
        return CompanyReconciliation(
            company_id=company.id,
            snapshot_date=day,
            reserve=reserve,
            prev_reserve=prev_reserve,
            diff=diff,
            pct_diff=pct_diff,
            created=created,
            enrichment=enrichment,
            total_cost_accumulated=total_cost,
            alert=alert,
        )

    def _load_company(self, company_id: int) -> tuple[Company, float | None]:
        with self._session_factory() as session:
            company = session.get(Company, company_id)
            if company is None:
                raise CompanyNotFoundError(company_id)
            return company, store.wallet_sums(session, company_id).get(company_id)

    def _load_companies(self) -> tuple[list[Company], dict[int, float]]:
        with self._session_factory() as session:
            return store.companies_to_reconcile(session), store.wallet_sums(session)

    async def reconcile_company(
        self, company_id: int, now: datetime | None = None
    ) -> CompanyReconciliation:
        """Refresh one company's snapshot for today without alerting.

        Raises:
            CompanyNotFoundError: no company has this id.
        """
        day = snapshot_day(now)
        company, wallet_sum = await asyncio.to_thread(self._load_company, company_id)
        return await self._reconcile(company, day, wallet_sum, with_alert=False)

    async def _fetch_price(self) -> float:
        try:
            return await asyncio.wait_for(
                self._price.get_eth_usd_price(), timeout=self._price_timeout
            )
        except PriceUnavailableError:
            raise
        except asyncio.TimeoutError as exc:
            raise PriceUnavailableError(
                f"ETH price lookup timed out after {self._price_timeout:.0f}s"
            ) from exc
        except Exception as exc:
            raise PriceUnavailableError(f"ETH price lookup failed: {exc}") from exc

    def _write_aggregate(self, day: date, eth_price: float) -> AggregateSummary:
        with self._session_factory() as session:
            eligible = [
                row.reserve
                for row, status in store.company_snapshots_for_day(session, day)
                if self._thresholds.counts_toward_aggregate(status, row.reserve)
            ]
            total_reserve = sum(eligible)
            prev = store.previous_snapshot(session, day)
            prev_total = prev.total_reserve if prev is not None else 0.0
            summary = AggregateSummary(
                total_reserve=total_reserve,
                diff=total_reserve - prev_total,
                total_reserve_usd=total_reserve * eth_price,
                total_companies=len(eligible),
                pct_diff=pct_change(total_reserve, prev_total),
                eth_price=eth_price,
            )
            store.upsert_snapshot(
                session,
                day,
                total_reserve=summary.total_reserve,
                total_reserve_usd=summary.total_reserve_usd,
                total_companies=summary.total_companies,
                pct_diff=summary.pct_diff,
                eth_price=summary.eth_price,
            )
        return summary

    async def run_daily(self, now: datetime | None = None) -> DailyRunSummary:
        """Reconcile every non-inactive company, then write the aggregate snapshot.

        Safe to call more than once per day: rows for the day are updated in place.

        Raises:
            PriceUnavailableError: no ETH/USD price; company snapshots are kept,
                no aggregate is written, and `partial` holds the company results.
        """
        day = snapshot_day(now)
        companies, sums = await asyncio.to_thread(self._load_companies)

        logger.info("Daily reconciliation for %s: %d companies", day, len(companies))
        results = await asyncio.gather(
            *(self._reconcile(c, day, sums.get(c.id), with_alert=True) for c in companies),
            return_exceptions=True,
        )

        summary = DailyRunSummary(snapshot_date=day)
        for company, result in zip(companies, results):
            if isinstance(result, Exception):
                logger.error(
                    "Reconciliation failed for company %s (%s): %r",
                    company.id, company.name, result,
                )
                summary.failed_company_ids.append(company.id)
                continue
            summary.companies.append(result)
            if result.alert is not None:
                summary.alerts.append(result.alert)

        try:
            eth_price = await self._fetch_price()
        except PriceUnavailableError as exc:
            logger.error("Daily reconciliation for %s aborted: %s", day, exc)
            exc.partial = summary
            raise

        summary.aggregate = await asyncio.to_thread(self._write_aggregate, day, eth_price)
        logger.info(
            "Daily snapshot %s: total=%.4f ETH across %d companies (%d failed, %d alerts)",
            day,
            summary.aggregate.total_reserve,
            summary.aggregate.total_companies,
            len(summary.failed_company_ids),
            len(summary.alerts),
        )
        return summary
