"""Email alerts through the Resend REST API."""
import html
import logging
import os

import httpx

from eth_reserve.providers.notifications.notifier_abc import NotifierABC
from eth_reserve.providers.notifications.resend.models import ResendEmail
from eth_reserve.schemas import AlertEvent

logger = logging.getLogger(__name__)


def _fmt_pct(pct: float | None) -> str:
    return "n/a" if pct is None else f"{pct:.2f}%"


def render_alert(event: AlertEvent) -> tuple[str, str]:
    """Return (subject, html body) for a change alert."""
    direction = "up" if event.diff >= 0 else "down"
    subject = (
        f"Reserve {direction} by {abs(event.diff):.2f} ETH for {event.company_name}"
    )
    body = (
        "<h2>Reserve Change Alert</h2>"
        f"<p><strong>Company:</strong> {html.escape(event.company_name)}</p>"
        f"<p><strong>Date:</strong> {event.snapshot_date.isoformat()}</p>"
        f"<p><strong>Previous Balance:</strong> {event.prev_reserve:.4f} ETH</p>"
        f"<p><strong>Current Balance:</strong> {event.current_reserve:.4f} ETH</p>"
        f"<p><strong>Percent Change:</strong> {_fmt_pct(event.pct_diff)}</p>"
    )
    return subject, body


class ResendNotifier(NotifierABC):
    """Sends change alerts by email. Without an API key or recipient it only logs."""

    name = "resend"
    BASE_URL = "https://api.resend.com"

    def __init__(
        self,
        api_key: str | None = None,
        to_address: str | None = None,
        from_address: str = "Strategic ETH Reserve <noreply@strategicethreserve.xyz>",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key or os.getenv("RESEND_API_KEY")
        self._to = to_address
        self._from = from_address
        self._client = client or httpx.AsyncClient(base_url=self.BASE_URL, timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._to)

    async def send_change_alert(self, event: AlertEvent) -> None:
        subject, body = render_alert(event)
        if not self.configured:
            logger.info("Alert email skipped (not configured): %s", subject)
            return
        email = ResendEmail(sender=self._from, to=[self._to], subject=subject, html=body)
        response = await self._client.post(
            "/emails",
            json=email.model_dump(by_alias=True),
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        response.raise_for_status()
        logger.info("Alert email sent: %s", subject)

    async def close(self) -> None:
        await self._client.aclose()
