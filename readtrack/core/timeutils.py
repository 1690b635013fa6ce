from datetime import datetime, date, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_day(ts: datetime) -> date:
    """Trunca un timestamp al día calendario UTC (naive = ya está en UTC)."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()
