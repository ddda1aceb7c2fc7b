"""
Domain: Derived purchase metrics.

Metrics are computed fresh for every generation call and never stored:
- total_spent = sum of the user's purchase amounts
- average_order_value = total_spent / purchase count (0 without purchases)
- days_since_last_purchase = floor((as_of - last purchase) / 24 hours), where the
  last purchase is the most recent of the user's last_purchase_date and the
  latest purchase record. Without any purchase history the sentinel
  NO_PURCHASE_SENTINEL_DAYS is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from .purchase import PurchaseRecord
from .time import require_utc_timestamp, whole_days_between
from .user import User

NO_PURCHASE_SENTINEL_DAYS: int = 999


@dataclass(frozen=True, slots=True)
class DerivedMetrics:
    total_spent: Decimal
    average_order_value: Decimal
    days_since_last_purchase: int
    purchase_count: int


def _last_purchase_at(user: User, purchases: list[PurchaseRecord]) -> Optional[datetime]:
    candidates = [p.purchased_at for p in purchases]
    if user.last_purchase_date is not None:
        candidates.append(user.last_purchase_date)
    return max(candidates) if candidates else None


def compute_derived_metrics(
    user: User,
    purchases: Iterable[PurchaseRecord],
    as_of: datetime,
) -> DerivedMetrics:
    """
    Compute DerivedMetrics for a user as of a given UTC instant.

    Only purchases belonging to the user are considered.
    """

    require_utc_timestamp("as_of", as_of)

    own = [p for p in purchases if p.user_id == user.user_id]
    total_spent = sum((p.amount for p in own), Decimal("0"))
    average = total_spent / len(own) if own else Decimal("0")

    last = _last_purchase_at(user, own)
    if last is None:
        days = NO_PURCHASE_SENTINEL_DAYS
    else:
        # A last purchase "in the future" (clock skew) counts as today.
        days = max(0, whole_days_between(last, as_of))

    return DerivedMetrics(
        total_spent=total_spent,
        average_order_value=average,
        days_since_last_purchase=days,
        purchase_count=len(own),
    )
