"""Wallet balance refresh: rescans the stalest auto-scanned wallet."""
import asyncio
import logging

from sqlmodel import col, select

from eth_reserve.db import CompanyWallet
from eth_reserve.db.sessions import SessionFactory
from eth_reserve.exceptions import BalanceUnavailableError
from eth_reserve.providers.core import BalanceResolver, wei_to_eth
from eth_reserve.schemas import WalletRefreshResult
from eth_reserve.utils import utcnow

logger = logging.getLogger(__name__)


class WalletRefresher:
    """Refreshes cached wallet balances one wallet per call, oldest first."""

    def __init__(
        self,
        session_factory: SessionFactory,
        resolver: BalanceResolver,
        *,
        timeout: float = 60.0,
    ) -> None:
        self._session_factory = session_factory
        self._resolver = resolver
        self._timeout = timeout

    def _stalest_wallet(self) -> CompanyWallet | None:
        stmt = (
            select(CompanyWallet)
            .where(col(CompanyWallet.auto_scan).is_(True))
            .order_by(col(CompanyWallet.updated_at).asc(), col(CompanyWallet.id).asc())
            .limit(1)
        )
        with self._session_factory() as session:
            return session.exec(stmt).first()

    def _store_balance(self, wallet_id: int, balance: float) -> bool:
        with self._session_factory() as session:
            row = session.get(CompanyWallet, wallet_id)
            if row is None:
                return False
            row.balance = balance
            row.updated_at = utcnow()
            session.add(row)
        return True

    async def refresh_next(self) -> WalletRefreshResult:
        """Resolve and store the balance of the least recently updated wallet.

        Raises:
            BalanceUnavailableError: the resolver failed or timed out; the row is untouched.
        """
        wallet = await asyncio.to_thread(self._stalest_wallet)
        if wallet is None:
            return WalletRefreshResult(message="No company wallets found to update")

        try:
            wei = await asyncio.wait_for(
                self._resolver.get_balance_wei(wallet.address), timeout=self._timeout
            )
        except BalanceUnavailableError:
            raise
        except asyncio.TimeoutError as exc:
            raise BalanceUnavailableError(
                f"Balance lookup for {wallet.address} timed out"
            ) from exc
        balance = wei_to_eth(wei)

        if not await asyncio.to_thread(self._store_balance, wallet.id, balance):
            return WalletRefreshResult(message="Wallet removed during refresh")

        logger.info("Wallet %s (%s) balance updated to %s ETH", wallet.id, wallet.address, balance)
        return WalletRefreshResult(
            message="Company wallet balance updated",
            wallet_id=wallet.id,
            address=wallet.address,
            balance=balance,
        )
