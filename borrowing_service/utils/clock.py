from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """DB'de naive UTC tutuyoruz (SQLite tz saklamaz)."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def to_aware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso_z(dt: datetime) -> str:
    # 2025-05-01T14:00:00Z
    return to_naive_utc(dt).isoformat() + "Z"
