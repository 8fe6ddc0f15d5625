"""Database models for the reserve tracker.

Wallet balances are a cache refreshed by the wallet job; the history lives in
the per-day snapshot tables, keyed by an explicit snapshot day.
"""
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from eth_reserve.utils import utcnow


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp stored in UTC.

    Naive values are taken to be UTC. Values read back are always aware, also on
    SQLite, which keeps no offset.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:  # noqa: ANN001
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:  # noqa: ANN001
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class CompanyStatus(str, Enum):
    """Lifecycle of a tracked company."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AccountingType(str, Enum):
    """Which source is authoritative for a company's current reserve."""

    SELF_REPORTED = "SELF_REPORTED"
    PUBLIC_REPORT = "PUBLIC_REPORT"
    WALLET_TRACKING = "WALLET_TRACKING"


class MarketCapTracking(str, Enum):
    """How market cap is sourced for a company, parsed from the stored label."""

    EQUITY = "Public Listing"
    CRYPTO = "Crypto"
    NONE = "None"

    @classmethod
    def parse(cls, raw: str | None) -> "MarketCapTracking":
        """Map a stored label to a variant; unknown or empty labels mean NONE."""
        for member in (cls.EQUITY, cls.CRYPTO):
            if raw == member.value:
                return member
        return cls.NONE


class PurchaseType(str, Enum):
    BUY = "buy"
    YIELD = "yield"


class Company(SQLModel, table=True):
    """A treasury holder tracked on the dashboard."""

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    category: str = ""
    secondary_categories: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    ticker: str | None = None
    accounting_type: AccountingType = Field(default=AccountingType.SELF_REPORTED)
    # "Public Listing" | "Crypto" | None, see MarketCapTracking.parse
    market_cap_tracking: str | None = None
    status: CompanyStatus = Field(default=CompanyStatus.PENDING, index=True)
    current_reserve: float = 0.0
    logo: str | None = None
    website: str | None = None
    contact: str | None = None
    news: str | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    @property
    def tracking(self) -> MarketCapTracking:
        return MarketCapTracking.parse(self.market_cap_tracking)


class CompanyWallet(SQLModel, table=True):
    """On-chain address owned by a company, with its last scanned balance in ETH."""

    __tablename__ = "company_wallet"

    id: int | None = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="company.id", index=True)
    address: str = Field(index=True)
    balance: float = 0.0
    auto_scan: bool = True
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Purchase(SQLModel, table=True):
    """Append-only ledger entry that increases a company's manual reserve."""

    id: int | None = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="company.id", index=True)
    amount: float
    total_cost: float
    type: PurchaseType
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class Snapshot(SQLModel, table=True):
    """Aggregate reserve across eligible companies for one UTC day."""

    id: int | None = Field(default=None, primary_key=True)
    snapshot_date: date = Field(unique=True, index=True)
    total_reserve: float
    total_reserve_usd: float
    total_companies: int
    pct_diff: float | None = None
    eth_price: float
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class SnapshotCompany(SQLModel, table=True):
    """One company's reserve for one UTC day."""

    __tablename__ = "snapshot_company"
    __table_args__ = (UniqueConstraint("company_id", "snapshot_date"),)

    id: int | None = Field(default=None, primary_key=True)
    company_id: int = Field(foreign_key="company.id", index=True)
    snapshot_date: date = Field(index=True)
    reserve: float
    pct_diff: float | None = None
    market_cap: float | None = None
    shares_outstanding: float | None = None
    total_cost_accumulated: float | None = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
