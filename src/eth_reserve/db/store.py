"""Queries and per-day upserts used by the reconciliation pipeline.

Snapshot rows are keyed by (company, day) and by day; writes find the row for
the key and update it, falling back to an insert. A unique constraint backs the
key, so a concurrent insert for the same day turns into an update instead of a
duplicate row.
"""
from collections.abc import Callable
from datetime import date
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, col, func, select

from eth_reserve.db.models import (Company, CompanyStatus, CompanyWallet,
                                   Purchase, Snapshot, SnapshotCompany)
from eth_reserve.utils import utcnow

RowT = TypeVar("RowT", bound=SQLModel)


def companies_to_reconcile(session: Session) -> list[Company]:
    """Every company not marked INACTIVE."""
    stmt = select(Company).where(Company.status != CompanyStatus.INACTIVE).order_by(Company.id)
    return list(session.exec(stmt))


def wallet_sums(session: Session, company_id: int | None = None) -> dict[int, float]:
    """Cached wallet balance per company; companies without wallets are absent."""
    stmt = select(CompanyWallet.company_id, func.sum(CompanyWallet.balance)).group_by(
        CompanyWallet.company_id
    )
    if company_id is not None:
        stmt = stmt.where(CompanyWallet.company_id == company_id)
    return {cid: float(total or 0.0) for cid, total in session.exec(stmt)}


def total_purchase_cost(session: Session, company_id: int) -> float | None:
    """Sum of all purchase costs for a company; None when it has no purchases."""
    stmt = select(func.sum(Purchase.total_cost)).where(Purchase.company_id == company_id)
    total = session.exec(stmt).one()
    return float(total) if total is not None else None


def previous_company_snapshot(
    session: Session, company_id: int, day: date
) -> SnapshotCompany | None:
    """Most recent company snapshot strictly before `day`."""
    stmt = (
        select(SnapshotCompany)
        .where(SnapshotCompany.company_id == company_id, SnapshotCompany.snapshot_date < day)
        .order_by(col(SnapshotCompany.snapshot_date).desc())
        .limit(1)
    )
    return session.exec(stmt).first()


def previous_snapshot(session: Session, day: date) -> Snapshot | None:
    """Most recent aggregate snapshot strictly before `day`."""
    stmt = (
        select(Snapshot)
        .where(Snapshot.snapshot_date < day)
        .order_by(col(Snapshot.snapshot_date).desc())
        .limit(1)
    )
    return session.exec(stmt).first()


def company_snapshots_for_day(
    session: Session, day: date
) -> list[tuple[SnapshotCompany, CompanyStatus]]:
    """Company snapshots written for `day`, with each company's current status."""
    stmt = (
        select(SnapshotCompany, Company.status)
        .join(Company, Company.id == SnapshotCompany.company_id)
        .where(SnapshotCompany.snapshot_date == day)
    )
    return list(session.exec(stmt))


def _upsert(
    session: Session,
    find: Callable[[], RowT | None],
    create: Callable[[], RowT],
    apply: Callable[[RowT], None],
) -> tuple[RowT, bool]:
    """Update the row `find` returns, or insert `create()`. Returns (row, created)."""
    row = find()
    if row is None:
        try:
            with session.begin_nested():
                row = create()
                session.add(row)
                session.flush()
            return row, True
        except IntegrityError:
            # another writer inserted the same key first
            row = find()
            if row is None:
                raise
    apply(row)
    row.updated_at = utcnow()
    session.add(row)
    session.flush()
    return row, False


def upsert_company_snapshot(
    session: Session,
    company_id: int,
    day: date,
    *,
    reserve: float,
    pct_diff: float | None,
    market_cap: float | None,
    shares_outstanding: float | None,
    total_cost_accumulated: float | None,
) -> tuple[SnapshotCompany, bool, float | None]:
    """Write the company snapshot for `day`.

    Market data is only overwritten when new values are present, so a failed
    enrichment on a rerun keeps what an earlier run stored.

    Returns:
        (row, created, reserve the row held before this write or None if created)
    """
    overwritten: list[float] = []

    def find() -> SnapshotCompany | None:
        stmt = select(SnapshotCompany).where(
            SnapshotCompany.company_id == company_id, SnapshotCompany.snapshot_date == day
        )
        return session.exec(stmt).first()

    def create() -> SnapshotCompany:
        return SnapshotCompany(
            company_id=company_id,
            snapshot_date=day,
            reserve=reserve,
            pct_diff=pct_diff,
            market_cap=market_cap,
            shares_outstanding=shares_outstanding,
            total_cost_accumulated=total_cost_accumulated,
        )

    def apply(row: SnapshotCompany) -> None:
        overwritten.append(row.reserve)
        row.reserve = reserve
        row.pct_diff = pct_diff
        if market_cap is not None:
            row.market_cap = market_cap
        if shares_outstanding is not None:
            row.shares_outstanding = shares_outstanding
        if total_cost_accumulated is not None:
            row.total_cost_accumulated = total_cost_accumulated

    row, created = _upsert(session, find, create, apply)
    return row, created, (overwritten[0] if overwritten else None)


def upsert_snapshot(
    session: Session,
    day: date,
    *,
    total_reserve: float,
    total_reserve_usd: float,
    total_companies: int,
    pct_diff: float | None,
    eth_price: float,
) -> tuple[Snapshot, bool]:
    """Write the aggregate snapshot for `day`. Returns (row, created)."""
    values = {
        "total_reserve": total_reserve,
        "total_reserve_usd": total_reserve_usd,
        "total_companies": total_companies,
        "pct_diff": pct_diff,
        "eth_price": eth_price,
    }

    def find() -> Snapshot | None:
        return session.exec(select(Snapshot).where(Snapshot.snapshot_date == day)).first()

    def apply(row: Snapshot) -> None:
        for key, value in values.items():
            setattr(row, key, value)

    return _upsert(session, find, lambda: Snapshot(snapshot_date=day, **values), apply)
