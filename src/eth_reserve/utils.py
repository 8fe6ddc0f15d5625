"""Shared utilities: UTC timestamps and snapshot days."""
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def snapshot_day(now: datetime | None = None) -> date:
    """Return the UTC calendar day a run at `now` belongs to.

    Naive datetimes are taken to be UTC already.
    """
    if now is None:
        now = utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()
