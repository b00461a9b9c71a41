# storyshare/utils/clock.py

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (SQLite хранит naive datetime)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Aware -> naive UTC; naive считаем уже UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def iso_utc(dt: datetime) -> str:
    """ISO-8601 с суффиксом Z (то, что уходит наружу)."""
    return to_naive_utc(dt).isoformat() + "Z"
