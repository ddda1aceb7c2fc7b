"""
Domain: Users (coupon recipients) and their loyalty tier.

Users are owned by an upstream system; the coupon engine only reads them.
Tier assignment happens upstream and is never changed here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional

from .time import require_utc_timestamp


class LoyaltyTier(str, Enum):
    REGULAR = "REGULAR"
    PREMIUM = "PREMIUM"
    VIP = "VIP"


@dataclass(frozen=True, slots=True)
class User:
    """
    Snapshot of a user with accumulated commerce history.

    `tier` holds the stored value as-is. It is normally a LoyaltyTier, but an
    unrecognized string is kept so the rule set can reject it explicitly
    instead of the row failing to load.
    """

    user_id: str
    email: str
    tier: str
    is_active: bool = True

    # Commerce history
    total_purchases: int = 0
    total_spent: Decimal = Decimal("0")
    last_purchase_date: Optional[datetime] = None
    favorite_categories: FrozenSet[str] = field(default_factory=frozenset)

    # Optional profile information
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None

    def __post_init__(self) -> None:
        if self.last_purchase_date is not None:
            require_utc_timestamp("last_purchase_date", self.last_purchase_date)

    def can_receive_coupons(self) -> bool:
        """Inactive users are ineligible for coupon generation."""
        return self.is_active
