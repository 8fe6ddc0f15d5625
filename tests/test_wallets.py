"""
Tests for the wallet balance refresh job.
"""

import threading
from datetime import datetime, timezone

import pytest

from conftest import FakeBalanceProvider
from eth_reserve.db import CompanyWallet
from eth_reserve.exceptions import BalanceUnavailableError
from eth_reserve.services import WalletRefresher


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def refresher(session_factory, provider, timeout=1.0):
    return WalletRefresher(session_factory, provider, timeout=timeout)


class TestRefreshNext:
    async def test_refreshes_stalest_auto_scan_wallet(self, session_factory, seed):
        cid = seed.company("Acme")
        seed.wallet(cid, "0xmanual", updated_at=utc(2024, 1, 1), auto_scan=False)
        stale = seed.wallet(cid, "0xstale", updated_at=utc(2025, 1, 1))
        seed.wallet(cid, "0xfresh", updated_at=utc(2025, 5, 1))
        provider = FakeBalanceProvider({"0xstale": 1_234_567_890_000_000_000_000})

        result = await refresher(session_factory, provider).refresh_next()

        assert provider.calls == ["0xstale"]
        assert result.message == "Company wallet balance updated"
        assert result.wallet_id == stale
        assert result.balance == 1234.5679
        row = seed.get(CompanyWallet, stale)
        assert row.balance == 1234.5679
        assert row.updated_at > utc(2025, 5, 1)

    async def test_rotates_through_wallets(self, session_factory, seed):
        cid = seed.company("Acme")
        seed.wallet(cid, "0xone", updated_at=utc(2025, 1, 1))
        seed.wallet(cid, "0xtwo", updated_at=utc(2025, 1, 2))
        provider = FakeBalanceProvider()
        job = refresher(session_factory, provider)

        await job.refresh_next()
        await job.refresh_next()

        assert provider.calls == ["0xone", "0xtwo"]

    async def test_no_wallets(self, session_factory):
        provider = FakeBalanceProvider()

        result = await refresher(session_factory, provider).refresh_next()

        assert result.message == "No company wallets found to update"
        assert result.wallet_id is None
        assert provider.calls == []

    async def test_resolver_failure_leaves_row_untouched(self, session_factory, seed):
        cid = seed.company("Acme")
        wid = seed.wallet(cid, "0xaaa", balance=42, updated_at=utc(2025, 1, 1))
        provider = FakeBalanceProvider(error=BalanceUnavailableError("all sources failed"))

        with pytest.raises(BalanceUnavailableError):
            await refresher(session_factory, provider).refresh_next()

        row = seed.get(CompanyWallet, wid)
        assert row.balance == 42
        assert row.updated_at == utc(2025, 1, 1)

    async def test_timeout_is_balance_failure(self, session_factory, seed):
        cid = seed.company("Acme")
        seed.wallet(cid, "0xslow")
        provider = FakeBalanceProvider(delay=1.0)

        with pytest.raises(BalanceUnavailableError, match="timed out"):
            await refresher(session_factory, provider, timeout=0.01).refresh_next()

    async def test_sessions_stay_off_the_event_loop(self, recording_factory, seed):
        cid = seed.company("Acme")
        seed.wallet(cid, "0xaaa")

        await refresher(recording_factory, FakeBalanceProvider()).refresh_next()

        assert len(recording_factory.threads) == 2
        assert threading.get_ident() not in recording_factory.threads
