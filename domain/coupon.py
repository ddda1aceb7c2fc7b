"""
Domain: Coupons and their one-way redemption state.

Rules implemented here:
- A coupon belongs to exactly one user.
- State machine: UNUSED -> USED. USED is terminal; is_used never returns to False.
- valid_until is valid_from + 30 days at creation.

This module contains only pure domain entities: no I/O, no database, no frameworks.
All timestamps must be passed explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional

from .time import require_utc_timestamp


class CouponKind(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    FREE_SHIPPING = "FREE_SHIPPING"
    BUY_ONE_GET_ONE = "BUY_ONE_GET_ONE"


@dataclass(frozen=True, slots=True)
class Coupon:
    """
    Immutable issued discount instrument.

    Redemption is modelled by returning a new instance from `redeemed()`;
    the stored record is replaced by the repository.
    """

    coupon_id: str
    code: str
    kind: CouponKind
    value: Decimal
    min_order_amount: Decimal
    valid_from: datetime
    valid_until: datetime
    user_id: str
    created_at: datetime
    is_used: bool = False
    usage_limit: int = 1
    current_usage: int = 0
    max_discount_amount: Optional[Decimal] = None
    applicable_categories: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("valid_from", self.valid_from)
        require_utc_timestamp("valid_until", self.valid_until)
        require_utc_timestamp("created_at", self.created_at)
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until must be >= valid_from")

    @property
    def has_min_order(self) -> bool:
        return self.min_order_amount > 0

    def is_expired(self, as_of: datetime) -> bool:
        """A coupon is expired strictly after valid_until."""

        require_utc_timestamp("as_of", as_of)
        return as_of > self.valid_until

    def meets_min_order(self, order_amount: Decimal) -> bool:
        if not self.has_min_order:
            return True
        return order_amount >= self.min_order_amount

    def redeemed(self) -> "Coupon":
        """
        Return a new Coupon marked as used.

        Enforces the one-way UNUSED -> USED transition.
        """

        if self.is_used:
            raise ValueError(f"Coupon {self.code} is already used")
        return replace(self, is_used=True, current_usage=self.current_usage + 1)
