"""In-process job runners for system cron, bypassing the HTTP layer."""
import asyncio
import logging
import sys

from eth_reserve.container import CLOSABLE_PROVIDERS, Container, init_container
from eth_reserve.db.sessions import init_db
from eth_reserve.exceptions import PriceUnavailableError
from eth_reserve.main import configure_logging

logger = logging.getLogger(__name__)


async def _close_providers(container: Container) -> None:
    for name in CLOSABLE_PROVIDERS:
        provider = getattr(container, name)()
        try:
            await provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)


async def daily_snapshots(container: Container) -> int:
    """Run one reconciliation pass and dispatch its alerts; returns an exit code."""
    init_db(container.db_engine())
    engine = container.snapshot_engine()
    dispatcher = container.alert_dispatcher()
    try:
        try:
            summary = await engine.run_daily()
        except PriceUnavailableError as exc:
            if exc.partial is not None:
                await dispatcher.dispatch(exc.partial.alerts)
            return 1
        sent = await dispatcher.dispatch(summary.alerts)
        logger.info("Dispatched %d/%d alerts", sent, len(summary.alerts))
        return 0 if not summary.failed_company_ids else 2
    finally:
        await _close_providers(container)


def run_daily_snapshots() -> None:
    """Entry point for `run-daily-snapshots`.

    Exit codes: 0 success, 1 no ETH price (no aggregate written), 2 some
    companies failed to reconcile.
    """
    container = init_container()
    configure_logging(container.settings().log_level)
    sys.exit(asyncio.run(daily_snapshots(container)))
