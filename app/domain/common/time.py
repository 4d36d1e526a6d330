from __future__ import annotations

from datetime import date, datetime, timezone


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # always stored in UTC so that string comparison in SQL orders correctly
    return dt.astimezone(timezone.utc).isoformat()


def from_iso(s: str) -> datetime:
    return datetime.fromisoformat(s)


def date_to_iso(d: date) -> str:
    return d.isoformat()


def date_from_iso(s: str) -> date:
    return date.fromisoformat(s)
