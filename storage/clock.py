"""UTC timestamp helpers shared by the stores and services."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Fixed-width ISO string so stored timestamps sort lexicographically."""
    if dt is None:
        return None
    return as_utc(dt).isoformat(timespec="milliseconds")


__all__ = ["as_utc", "to_iso", "utc_now"]
