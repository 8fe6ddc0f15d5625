"""Percentage, eligibility and alert rules shared by every reconciliation path."""
from dataclasses import dataclass

from eth_reserve.config import Settings
from eth_reserve.db import CompanyStatus
from eth_reserve.providers.core.utils import round2


def pct_change(current: float, previous: float | None) -> float | None:
    """Percent change rounded to 2 decimals; None when there is no positive baseline."""
    if previous is None or previous <= 0:
        return None
    return round2((current - previous) / previous * 100)


@dataclass(frozen=True)
class Thresholds:
    """Eligibility and alert thresholds, configurable through Settings."""

    aggregate_min_reserve: float = 100.0
    alert_pct: float = 1.0
    alert_abs: float = 50.0
    overwrite_min_diff: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "Thresholds":
        return cls(
            aggregate_min_reserve=settings.aggregate_min_reserve,
            alert_pct=settings.alert_pct_threshold,
            alert_abs=settings.alert_abs_threshold,
            overwrite_min_diff=settings.overwrite_alert_min_diff,
        )

    def counts_toward_aggregate(self, status: CompanyStatus, reserve: float) -> bool:
        return status == CompanyStatus.ACTIVE and reserve > self.aggregate_min_reserve

    def crosses_alert(self, diff: float, pct_diff: float | None) -> bool:
        return (pct_diff is not None and abs(pct_diff) > self.alert_pct) or diff >= self.alert_abs

    def should_alert(
        self,
        *,
        created: bool,
        overwritten_reserve: float | None,
        reserve: float,
        diff: float,
        pct_diff: float | None,
    ) -> bool:
        """Alert on new snapshots, or on overwrites that moved the reserve materially."""
        if not created:
            if overwritten_reserve is None:
                return False
            if abs(reserve - overwritten_reserve) <= self.overwrite_min_diff:
                return False
        return self.crosses_alert(diff, pct_diff)
