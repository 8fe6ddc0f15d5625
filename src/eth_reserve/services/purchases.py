"""Purchase ledger: append a purchase, bump the company's reserve, refresh today's snapshot."""
import asyncio
import logging
from datetime import datetime

from sqlmodel import col, select

from eth_reserve.db import Company, Purchase
from eth_reserve.db.sessions import SessionFactory
from eth_reserve.exceptions import CompanyNotFoundError
from eth_reserve.schemas import PurchaseCreate, PurchaseRead, PurchaseResult
from eth_reserve.services.snapshot_engine import SnapshotEngine

logger = logging.getLogger(__name__)


class PurchaseLedger:
    """Records purchases and keeps the day's company snapshot in step with them."""

    def __init__(self, session_factory: SessionFactory, engine: SnapshotEngine) -> None:
        self._session_factory = session_factory
        self._engine = engine

    def _append(self, data: PurchaseCreate) -> tuple[Purchase, float]:
        """Insert the purchase and increment the reserve in one transaction."""
        with self._session_factory() as session:
            company = session.get(Company, data.company_id, with_for_update=True)
            if company is None:
                raise CompanyNotFoundError(data.company_id)
            purchase = Purchase(
                company_id=data.company_id,
                amount=data.amount,
                total_cost=data.total_cost,
                type=data.type,
            )
            company.current_reserve = (company.current_reserve or 0.0) + data.amount
            session.add(purchase)
            session.add(company)
            session.flush()
            session.refresh(purchase)
            new_reserve = company.current_reserve
        return purchase, new_reserve

    async def record_purchase(
        self, data: PurchaseCreate, now: datetime | None = None
    ) -> PurchaseResult:
        """Record a purchase and refresh today's snapshot for the company.

        The purchase is committed before the snapshot refresh; a refresh failure
        is logged and leaves the purchase in place.

        Raises:
            CompanyNotFoundError: the company does not exist; nothing is written.
        """
        purchase, new_reserve = await asyncio.to_thread(self._append, data)
        logger.info(
            "Purchase %s recorded: company=%s amount=%s cost=%s type=%s",
            purchase.id, data.company_id, data.amount, data.total_cost, data.type.value,
        )
        try:
            await self._engine.reconcile_company(data.company_id, now=now)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to update snapshot for company %s", data.company_id)
        return PurchaseResult(
            purchase=PurchaseRead.model_validate(purchase),
            new_current_reserve=new_reserve,
        )

    def list_purchases(self, company_id: int | None = None) -> list[PurchaseRead]:
        """Purchases newest first, optionally for one company."""
        stmt = select(Purchase).order_by(col(Purchase.created_at).desc(), col(Purchase.id).desc())
        if company_id is not None:
            stmt = stmt.where(Purchase.company_id == company_id)
        with self._session_factory() as session:
            return [PurchaseRead.model_validate(p) for p in session.exec(stmt)]
