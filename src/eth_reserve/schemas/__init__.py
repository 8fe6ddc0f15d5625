"""Pydantic schemas for API and runtime use. Not persisted to DB."""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from eth_reserve.db import PurchaseType


class EquityInfo(BaseModel):
    """Market data for a listed company; either field may be missing."""

    market_cap: float | None = None
    shares_outstanding: float | None = None


class CryptoInfo(BaseModel):
    """Market data for a crypto asset; either field may be missing."""

    market_cap: float | None = None
    price: float | None = None


class Enrichment(BaseModel):
    """Market data attached to a company snapshot, normalized across sources."""

    market_cap: float | None = None
    shares_outstanding: float | None = None


class AlertEvent(BaseModel):
    """Reserve change that crossed the alert thresholds."""

    company_id: int
    company_name: str
    pct_diff: float | None
    diff: float
    prev_reserve: float
    current_reserve: float
    snapshot_date: date


class CompanyReconciliation(BaseModel):
    """Outcome of reconciling one company for one day."""

    company_id: int
    snapshot_date: date
    reserve: float
    prev_reserve: float
    diff: float
    pct_diff: float | None
    created: bool
    enrichment: Enrichment = Field(default_factory=Enrichment)
    total_cost_accumulated: float | None = None
    alert: AlertEvent | None = None


class AggregateSummary(BaseModel):
    total_reserve: float
    diff: float
    total_reserve_usd: float
    total_companies: int
    pct_diff: float | None
    eth_price: float


class DailyRunSummary(BaseModel):
    """Result of one daily reconciliation run."""

    snapshot_date: date
    companies: list[CompanyReconciliation] = Field(default_factory=list)
    failed_company_ids: list[int] = Field(default_factory=list)
    aggregate: AggregateSummary | None = None
    alerts: list[AlertEvent] = Field(default_factory=list)


class PurchaseCreate(BaseModel):
    """Purchase submitted by an admin. Amount and cost must be positive finite numbers.

    Numeric strings and booleans are rejected rather than coerced.
    """

    company_id: int
    amount: float = Field(gt=0, strict=True, allow_inf_nan=False)
    total_cost: float = Field(gt=0, strict=True, allow_inf_nan=False)
    type: PurchaseType


class PurchaseRead(BaseModel):
    """Ledger entry as returned to API callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    amount: float
    total_cost: float
    type: PurchaseType
    created_at: datetime


class PurchaseResult(BaseModel):
    message: str = "Purchase created successfully"
    purchase: PurchaseRead
    new_current_reserve: float


class WalletRefreshResult(BaseModel):
    message: str
    wallet_id: int | None = None
    address: str | None = None
    balance: float | None = None


__all__ = [
    "AggregateSummary",
    "AlertEvent",
    "CompanyReconciliation",
    "CryptoInfo",
    "DailyRunSummary",
    "Enrichment",
    "EquityInfo",
    "PurchaseCreate",
    "PurchaseRead",
    "PurchaseResult",
    "WalletRefreshResult",
]
