"""Best-effort delivery of reserve change alerts."""
import asyncio
import logging
from collections.abc import Iterable

from eth_reserve.providers.core import ChangeNotifier
from eth_reserve.schemas import AlertEvent

logger = logging.getLogger(__name__)


class AlertDispatcher:
    """Sends alert events through a notifier; delivery failures are logged and dropped."""

    def __init__(self, notifier: ChangeNotifier, *, timeout: float = 10.0) -> None:
        self._notifier = notifier
        self._timeout = timeout

    async def _send(self, event: AlertEvent) -> bool:
        try:
            await asyncio.wait_for(self._notifier.send_change_alert(event), timeout=self._timeout)
            return True
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "Failed to send change alert for %s (%s)", event.company_name, event.snapshot_date
            )
            return False

    async def dispatch(self, events: Iterable[AlertEvent]) -> int:
        """Send every event; returns how many were delivered."""
        results = await asyncio.gather(*(self._send(e) for e in events))
        return sum(results)
