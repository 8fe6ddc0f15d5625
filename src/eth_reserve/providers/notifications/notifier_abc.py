"""Abstract base class for change alert notifiers."""
from abc import abstractmethod

from eth_reserve.providers.core import ProviderABC
from eth_reserve.schemas import AlertEvent


class NotifierABC(ProviderABC):
    """Base interface for delivering reserve change alerts."""

    @abstractmethod
    async def send_change_alert(self, event: AlertEvent) -> None:
        """Deliver one alert. Raise on delivery failure; callers decide what to swallow."""
