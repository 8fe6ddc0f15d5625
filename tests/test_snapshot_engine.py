"""
Tests for the daily reconciliation run and single-company refresh.
"""

import asyncio
import threading

import pytest

from conftest import RUN_AT, TODAY, YESTERDAY
from eth_reserve.db import (AccountingType, Company, CompanyStatus,
                            CompanyWallet, Snapshot, SnapshotCompany)
from eth_reserve.exceptions import CompanyNotFoundError, PriceUnavailableError
from eth_reserve.schemas import Enrichment
from eth_reserve.services import SnapshotEngine


class TestCurrentReserve:
    async def test_wallet_tracking_uses_wallet_sum(self, engine, seed):
        cid = seed.company(
            "Walleted", accounting_type=AccountingType.WALLET_TRACKING, current_reserve=50
        )
        seed.wallet(cid, "0xaaa", balance=120)
        seed.wallet(cid, "0xbbb", balance=30.5)

        await engine.run_daily(RUN_AT)

        assert seed.company_snapshot_for(cid).reserve == 150.5

    async def test_wallet_tracking_without_wallets_falls_back(self, engine, seed):
        cid = seed.company(
            "NoWallets", accounting_type=AccountingType.WALLET_TRACKING, current_reserve=75
        )

        await engine.run_daily(RUN_AT)

        assert seed.company_snapshot_for(cid).reserve == 75

    async def test_self_reported_ignores_wallets(self, engine, seed):
        cid = seed.company("Reported", current_reserve=400)
        seed.wallet(cid, "0xccc", balance=9999)

        await engine.run_daily(RUN_AT)

        assert seed.company_snapshot_for(cid).reserve == 400


class TestCompanySnapshots:
    async def test_diff_against_previous_snapshot(self, engine, seed):
        cid = seed.company("Acme", current_reserve=1100)
        seed.company_snapshot(cid, YESTERDAY, 1000)

        summary = await engine.run_daily(RUN_AT)

        [result] = summary.companies
        assert result.prev_reserve == 1000
        assert result.diff == 100
        assert result.pct_diff == 10.0
        assert seed.company_snapshot_for(cid).pct_diff == 10.0

    async def test_first_snapshot_compares_with_manual_reserve(self, engine, seed):
        cid = seed.company(
            "Fresh", accounting_type=AccountingType.WALLET_TRACKING, current_reserve=180
        )
        seed.wallet(cid, "0xddd", balance=200)

        summary = await engine.run_daily(RUN_AT)

        [result] = summary.companies
        assert result.prev_reserve == 180
        assert result.diff == 20

    async def test_zero_baseline_gives_no_pct(self, engine, seed):
        cid = seed.company(
            "FromZero", accounting_type=AccountingType.WALLET_TRACKING, current_reserve=0
        )
        seed.wallet(cid, "0xeee", balance=200)

        await engine.run_daily(RUN_AT)

        row = seed.company_snapshot_for(cid)
        assert row.reserve == 200
        assert row.pct_diff is None

    async def test_inactive_companies_are_skipped(self, engine, seed):
        inactive = seed.company("Gone", status=CompanyStatus.INACTIVE, current_reserve=5000)
        pending = seed.company("Soon", status=CompanyStatus.PENDING, current_reserve=5000)

        await engine.run_daily(RUN_AT)

        assert seed.company_snapshot_for(inactive) is None
        assert seed.company_snapshot_for(pending).reserve == 5000

    async def test_total_cost_accumulated(self, engine, seed):
        bought = seed.company("Buyer", current_reserve=500)
        seed.purchase(bought, 10, 20000)
        seed.purchase(bought, 5, 15000)
        idle = seed.company("Idle", current_reserve=500)

        await engine.run_daily(RUN_AT)

        assert seed.company_snapshot_for(bought).total_cost_accumulated == 35000
        assert seed.company_snapshot_for(idle).total_cost_accumulated is None


class TestIdempotence:
    async def test_rerun_updates_rows_in_place(self, engine, seed):
        cid = seed.company(
            "Walleted", accounting_type=AccountingType.WALLET_TRACKING, current_reserve=0
        )
        wallet_id = seed.wallet(cid, "0xaaa", balance=300)
        seed.company("Other", current_reserve=250)

        first = await engine.run_daily(RUN_AT)
        seed.update(CompanyWallet, wallet_id, balance=320)
        second = await engine.run_daily(RUN_AT.replace(hour=18))

        assert all(r.created for r in first.companies)
        assert not any(r.created for r in second.companies)
        assert len(seed.all(SnapshotCompany)) == 2
        assert len(seed.all(Snapshot)) == 1
        assert seed.company_snapshot_for(cid).reserve == 320
        [aggregate] = seed.all(Snapshot)
        assert aggregate.total_reserve == 570

    async def test_rerun_keeps_market_data_when_enrichment_fails(self, engine, seed, equity):
        cid = seed.company("Listed", ticker="BMNR", market_cap_tracking="Public Listing",
                           current_reserve=500)

        await engine.run_daily(RUN_AT)
        equity.error = RuntimeError("rate limited")
        await engine.run_daily(RUN_AT)

        row = seed.company_snapshot_for(cid)
        assert row.market_cap == 2_000_000_000.0
        assert row.shares_outstanding == 50_000_000.0


class TestAggregate:
    async def test_only_active_companies_above_minimum_count(self, engine, seed):
        seed.company("Big", current_reserve=500)
        seed.company("Boundary", current_reserve=100)
        seed.company("Small", current_reserve=99)
        seed.company("Pending", status=CompanyStatus.PENDING, current_reserve=1000)
        seed.company("Inactive", status=CompanyStatus.INACTIVE, current_reserve=2000)

        summary = await engine.run_daily(RUN_AT)

        assert summary.aggregate.total_reserve == 500
        assert summary.aggregate.total_companies == 1
        [row] = seed.all(Snapshot)
        assert row.snapshot_date == TODAY
        assert row.total_reserve == 500
        assert row.total_reserve_usd == 1_500_000
        assert row.eth_price == 3000
        assert row.total_companies == 1

    async def test_pct_against_previous_aggregate(self, engine, seed):
        seed.company("Big", current_reserve=500)
        seed.snapshot(YESTERDAY, 400)

        summary = await engine.run_daily(RUN_AT)

        assert summary.aggregate.diff == 100
        assert summary.aggregate.pct_diff == 25.0

    async def test_first_aggregate_has_no_pct(self, engine, seed):
        seed.company("Big", current_reserve=500)

        summary = await engine.run_daily(RUN_AT)

        assert summary.aggregate.pct_diff is None

    async def test_empty_run_writes_zero_aggregate(self, engine, seed):
        summary = await engine.run_daily(RUN_AT)

        assert summary.companies == []
        assert summary.aggregate.total_reserve == 0
        assert summary.aggregate.total_companies == 0


class TestEnrichment:
    async def test_equity_market_data_is_stored(self, engine, seed, equity):
        cid = seed.company("Listed", ticker=" bmnr ", market_cap_tracking="Public Listing",
                           current_reserve=500)

        await engine.run_daily(RUN_AT)

        row = seed.company_snapshot_for(cid)
        assert row.market_cap == 2_000_000_000.0
        assert row.shares_outstanding == 50_000_000.0
        assert equity.calls == ["bmnr"]

    async def test_crypto_market_data_has_no_shares(self, engine, seed, equity, crypto):
        cid = seed.company("Token", ticker="ethena", market_cap_tracking="Crypto",
                           current_reserve=500)

        await engine.run_daily(RUN_AT)

        row = seed.company_snapshot_for(cid)
        assert row.market_cap == 750_000_000.0
        assert row.shares_outstanding is None
        assert crypto.calls == ["ethena"]
        assert equity.calls == []

    async def test_resolver_error_still_writes_snapshot(self, engine, seed, equity):
        equity.error = RuntimeError("ticker not found")
        cid = seed.company("Listed", ticker="NOPE", market_cap_tracking="Public Listing",
                           current_reserve=500)

        summary = await engine.run_daily(RUN_AT)

        row = seed.company_snapshot_for(cid)
        assert row.reserve == 500
        assert row.market_cap is None
        assert summary.failed_company_ids == []


class TestPriceFailure:
    async def test_no_aggregate_without_price(self, engine, seed, price_failure):
        cid = seed.company("Big", current_reserve=500)

        with pytest.raises(PriceUnavailableError) as exc_info:
            await engine.run_daily(RUN_AT)

        assert seed.all(Snapshot) == []
        assert seed.company_snapshot_for(cid).reserve == 500
        partial = exc_info.value.partial
        assert partial.aggregate is None
        assert [r.company_id for r in partial.companies] == [cid]

    async def test_price_timeout_is_price_failure(self, session_factory, enricher, seed):
        class SlowPrice:
            async def get_eth_usd_price(self):
                await asyncio.sleep(1)
                return 3000.0

        engine = SnapshotEngine(session_factory, enricher, SlowPrice(), price_timeout=0.01)
        seed.company("Big", current_reserve=500)

        with pytest.raises(PriceUnavailableError, match="timed out"):
            await engine.run_daily(RUN_AT)

        assert seed.all(Snapshot) == []


class TestFailureIsolation:
    async def test_one_company_failing_does_not_stop_others(self, session_factory, crypto, seed):
        class FlakyEnricher:
            async def enrich(self, company):
                if company.name == "Broken":
                    raise RuntimeError("boom")
                return Enrichment()

        engine = SnapshotEngine(session_factory, FlakyEnricher(), crypto)
        broken = seed.company("Broken", current_reserve=900)
        healthy = seed.company("Healthy", current_reserve=600)

        summary = await engine.run_daily(RUN_AT)

        assert summary.failed_company_ids == [broken]
        assert [r.company_id for r in summary.companies] == [healthy]
        assert seed.company_snapshot_for(broken) is None
        assert summary.aggregate.total_reserve == 600


class TestAlerts:
    async def test_alert_only_when_threshold_crossed(self, engine, seed):
        steady = seed.company("Steady", current_reserve=1005)
        seed.company_snapshot(steady, YESTERDAY, 1000)
        jumpy = seed.company("Jumpy", current_reserve=1060)
        seed.company_snapshot(jumpy, YESTERDAY, 1000)

        summary = await engine.run_daily(RUN_AT)

        [alert] = summary.alerts
        assert alert.company_id == jumpy
        assert alert.company_name == "Jumpy"
        assert alert.diff == 60
        assert alert.pct_diff == 6.0
        assert alert.prev_reserve == 1000
        assert alert.current_reserve == 1060
        assert alert.snapshot_date == TODAY

    async def test_overwrite_alerts_only_on_material_change(self, engine, seed):
        cid = seed.company("Acme", current_reserve=1000)
        seed.company_snapshot(cid, YESTERDAY, 1000)

        first = await engine.run_daily(RUN_AT)
        seed.update(Company, cid, current_reserve=1060)
        second = await engine.run_daily(RUN_AT)
        seed.update(Company, cid, current_reserve=1065)
        third = await engine.run_daily(RUN_AT)

        assert first.alerts == []
        assert [a.current_reserve for a in second.alerts] == [1060]
        assert third.alerts == []


class TestReconcileCompany:
    async def test_refreshes_one_company_without_alert(self, engine, seed):
        cid = seed.company("Acme", current_reserve=2000)
        seed.company_snapshot(cid, YESTERDAY, 1000)
        other = seed.company("Other", current_reserve=300)

        result = await engine.reconcile_company(cid, now=RUN_AT)

        assert result.reserve == 2000
        assert result.alert is None
        assert seed.company_snapshot_for(other) is None
        assert seed.all(Snapshot) == []

    async def test_unknown_company(self, engine):
        with pytest.raises(CompanyNotFoundError):
            await engine.reconcile_company(12345, now=RUN_AT)


class TestSessionThreads:
    async def test_daily_run_keeps_sessions_off_the_event_loop(
        self, recording_factory, enricher, crypto, seed
    ):
        engine = SnapshotEngine(recording_factory, enricher, crypto)
        seed.company("Acme", current_reserve=500)
        seed.company("Other", current_reserve=300)

        await engine.run_daily(RUN_AT)
        await engine.reconcile_company(1, now=RUN_AT)

        # load, two company writes, aggregate, single-company load and write
        assert len(recording_factory.threads) == 6
        assert threading.get_ident() not in recording_factory.threads
