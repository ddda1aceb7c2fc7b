"""
Domain: Purchase history.

A PurchaseRecord is one historical order. Records are read-only input to the
derived metrics used by the tier rules; they are owned by the purchase store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class PurchaseRecord:
    """
    Immutable record of a single order placed by a user.

    All timestamps must be passed explicitly.
    """

    user_id: str
    amount: Decimal
    purchased_at: datetime
    category: str
    order_id: Optional[str] = None
    product_count: Optional[int] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("purchased_at", self.purchased_at)
