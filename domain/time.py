"""
Domain time utilities (pure).

Centralized timestamp validation and day arithmetic shared by the coupon,
user and purchase entities.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Coupons are valid for a fixed window starting at issuance.
COUPON_VALIDITY: timedelta = timedelta(days=30)


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforce that a timestamp is UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    """Current instant as a UTC timestamp; injected as the default clock."""

    return datetime.now(timezone.utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole 24-hour days elapsed from start to end (floor)."""

    require_utc_timestamp("start", start)
    require_utc_timestamp("end", end)
    return int((end - start) // timedelta(days=1))
