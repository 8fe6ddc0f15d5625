"""Purchase ledger routes (admin only)."""
import logging

from fastapi import APIRouter, Depends, Query

from eth_reserve.auth import require_admin
from eth_reserve.deps import PurchaseLedgerDep
from eth_reserve.exceptions import LedgerValidationError
from eth_reserve.providers.core import ErrorMapper
from eth_reserve.schemas import PurchaseCreate, PurchaseRead, PurchaseResult

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/purchases", tags=["purchases"], dependencies=[Depends(require_admin)]
)

_errors = ErrorMapper(operation="Purchase")


@router.post("", response_model=PurchaseResult)
async def create_purchase(data: PurchaseCreate, ledger: PurchaseLedgerDep) -> PurchaseResult:
    """Record a buy or yield entry and add its amount to the company's reserve.

    Returns the ledger entry and the company's new reserve. Today's company
    snapshot is refreshed right away.
    """
    try:
        return await ledger.record_purchase(data)
    except LedgerValidationError as exc:
        _errors.raise_http(exc)
    except Exception as exc:
        logger.exception("Failed to create purchase")
        _errors.raise_http(exc)


@router.get("", response_model=list[PurchaseRead])
def list_purchases(
    ledger: PurchaseLedgerDep,
    company_id: int | None = Query(default=None, description="Only this company's purchases"),
) -> list[PurchaseRead]:
    """List purchases, newest first."""
    return ledger.list_purchases(company_id)
