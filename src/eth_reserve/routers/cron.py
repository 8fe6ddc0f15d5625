"""Scheduled job endpoints: daily snapshots and wallet balance refresh."""
import logging

from fastapi import APIRouter, Depends

from eth_reserve.auth import require_cron
from eth_reserve.deps import (AlertDispatcherDep, SnapshotEngineDep,
                              WalletRefresherDep)
from eth_reserve.exceptions import PriceUnavailableError
from eth_reserve.providers.core import ErrorMapper
from eth_reserve.schemas import DailyRunSummary, WalletRefreshResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(require_cron)])

_snapshot_errors = ErrorMapper(operation="Daily snapshot")
_wallet_errors = ErrorMapper(operation="Wallet refresh")


@router.api_route("/update-snapshots", methods=["GET", "POST"], response_model=DailyRunSummary)
async def update_snapshots(
    engine: SnapshotEngineDep,
    dispatcher: AlertDispatcherDep,
) -> DailyRunSummary:
    """Run the daily reconciliation for today (UTC) and send change alerts.

    Reruns on the same day update today's rows. Responds 502 without writing
    the aggregate snapshot when no ETH price is available.
    """
    try:
        summary = await engine.run_daily()
    except PriceUnavailableError as exc:
        if exc.partial is not None:
            await dispatcher.dispatch(exc.partial.alerts)
        _snapshot_errors.raise_http(exc)
    except Exception as exc:
        logger.exception("Daily snapshot cron error")
        _snapshot_errors.raise_http(exc)
    await dispatcher.dispatch(summary.alerts)
    return summary


@router.api_route(
    "/update-company-wallet", methods=["GET", "POST"], response_model=WalletRefreshResult
)
async def update_company_wallet(refresher: WalletRefresherDep) -> WalletRefreshResult:
    """Rescan the balance of the least recently updated auto-scan wallet."""
    try:
        return await refresher.refresh_next()
    except Exception as exc:
        logger.exception("Wallet refresh cron error")
        _wallet_errors.raise_http(exc)
