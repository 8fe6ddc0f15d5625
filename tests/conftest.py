"""
Pytest configuration and fixtures for eth_reserve tests.

Fixtures provide:
- An in-memory SQLite database with all tables
- Fake market data, price, balance and notification providers
- Seeding helpers for companies, wallets, snapshots and purchases
"""

import asyncio
import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone

import pytest
from dependency_injector import providers
from sqlmodel import select

from eth_reserve.config import Settings
from eth_reserve.container import Container
from eth_reserve.db import (AccountingType, Company, CompanyStatus,
                            CompanyWallet, Purchase, PurchaseType, Snapshot,
                            SnapshotCompany)
from eth_reserve.db.sessions import (create_db_engine, init_db,
                                     make_session_factory)
from eth_reserve.exceptions import PriceUnavailableError
from eth_reserve.schemas import CryptoInfo, EquityInfo
from eth_reserve.services import MarketDataEnricher, SnapshotEngine

RUN_AT = datetime(2025, 6, 2, 15, 30, tzinfo=timezone.utc)
TODAY = date(2025, 6, 2)
YESTERDAY = date(2025, 6, 1)


# =============================================================================
# Fake providers
# =============================================================================

class FakeEquityProvider:
    """Equity resolver returning a fixed answer, raising, or stalling."""

    def __init__(self, info=None, error=None, delay=0.0):
        self.info = info or EquityInfo()
        self.error = error
        self.delay = delay
        self.calls = []

    async def get_equity_info(self, ticker):
        self.calls.append(ticker)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.info

    async def close(self):
        pass


class FakeCryptoProvider:
    """Crypto info and ETH price resolver."""

    def __init__(self, info=None, eth_price=3000.0, error=None, price_error=None):
        self.info = info or CryptoInfo()
        self.eth_price = eth_price
        self.error = error
        self.price_error = price_error
        self.calls = []

    async def get_crypto_info(self, symbol):
        self.calls.append(symbol)
        if self.error is not None:
            raise self.error
        return self.info

    async def get_eth_usd_price(self):
        if self.price_error is not None:
            raise self.price_error
        return self.eth_price

    async def close(self):
        pass


class FakeBalanceProvider:
    def __init__(self, balances=None, error=None, delay=0.0):
        self.balances = balances or {}
        self.error = error
        self.delay = delay
        self.calls = []

    async def get_balance_wei(self, address):
        self.calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.balances.get(address, 0)

    async def close(self):
        pass


class RecordingNotifier:
    def __init__(self, error=None):
        self.events = []
        self.error = error

    async def send_change_alert(self, event):
        if self.error is not None:
            raise self.error
        self.events.append(event)

    async def close(self):
        pass


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def db_engine():
    """Fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return make_session_factory(db_engine)


class Seeder:
    """Inserts rows and reads them back for assertions."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def company(self, name="Acme", **fields) -> int:
        fields.setdefault("status", CompanyStatus.ACTIVE)
        fields.setdefault("accounting_type", AccountingType.SELF_REPORTED)
        with self._session_factory() as session:
            company = Company(name=name, **fields)
            session.add(company)
            session.flush()
            return company.id

    def wallet(self, company_id, address, balance=0.0, **fields) -> int:
        with self._session_factory() as session:
            wallet = CompanyWallet(company_id=company_id, address=address, balance=balance, **fields)
            session.add(wallet)
            session.flush()
            return wallet.id

    def company_snapshot(self, company_id, day, reserve, **fields) -> None:
        with self._session_factory() as session:
            session.add(SnapshotCompany(company_id=company_id, snapshot_date=day, reserve=reserve, **fields))

    def snapshot(self, day, total_reserve, **fields) -> None:
        fields.setdefault("total_reserve_usd", total_reserve * 3000.0)
        fields.setdefault("total_companies", 1)
        fields.setdefault("eth_price", 3000.0)
        with self._session_factory() as session:
            session.add(Snapshot(snapshot_date=day, total_reserve=total_reserve, **fields))

    def purchase(self, company_id, amount, total_cost, type=PurchaseType.BUY) -> None:
        with self._session_factory() as session:
            session.add(Purchase(company_id=company_id, amount=amount, total_cost=total_cost, type=type))

    def update(self, model, row_id, **fields) -> None:
        with self._session_factory() as session:
            row = session.get(model, row_id)
            for key, value in fields.items():
                setattr(row, key, value)
            session.add(row)

    def all(self, model, *where):
        with self._session_factory() as session:
            return list(session.exec(select(model).where(*where)))

    def get(self, model, row_id):
        with self._session_factory() as session:
            return session.get(model, row_id)

    def company_snapshot_for(self, company_id, day=TODAY):
        rows = self.all(
            SnapshotCompany,
            SnapshotCompany.company_id == company_id,
            SnapshotCompany.snapshot_date == day,
        )
        return rows[0] if rows else None


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)


class ThreadRecordingFactory:
    """Session factory that records the thread each session was opened on."""

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self.threads = []

    @contextmanager
    def __call__(self):
        self.threads.append(threading.get_ident())
        with self._session_factory() as session:
            yield session


@pytest.fixture
def recording_factory(session_factory):
    return ThreadRecordingFactory(session_factory)


# =============================================================================
# Providers and engine
# =============================================================================

@pytest.fixture
def equity():
    return FakeEquityProvider(EquityInfo(market_cap=2_000_000_000.0, shares_outstanding=50_000_000.0))


@pytest.fixture
def crypto():
    return FakeCryptoProvider(CryptoInfo(market_cap=750_000_000.0, price=1.25), eth_price=3000.0)


@pytest.fixture
def enricher(equity, crypto):
    return MarketDataEnricher(equity, crypto, timeout=0.5)


@pytest.fixture
def engine(session_factory, enricher, crypto):
    return SnapshotEngine(session_factory, enricher, crypto, price_timeout=0.5)


@pytest.fixture
def price_failure(crypto):
    crypto.price_error = PriceUnavailableError("CoinGecko returned no ETH price")
    return crypto


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def balances():
    return FakeBalanceProvider({"0xaaa": 5 * 10**18})


@pytest.fixture
def container(db_engine, equity, crypto, balances, notifier):
    """Application container wired to the test database and fake providers."""
    container = Container()
    container.settings.override(
        providers.Object(
            Settings(database_url="sqlite://", admin_token="admin-secret", cron_secret="cron-secret")
        )
    )
    container.db_engine.override(providers.Object(db_engine))
    container.equity_provider.override(providers.Object(equity))
    container.crypto_provider.override(providers.Object(crypto))
    container.balance_provider.override(providers.Object(balances))
    container.notifier.override(providers.Object(notifier))
    yield container
    container.reset_override()
