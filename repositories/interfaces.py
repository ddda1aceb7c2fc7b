"""
Repository interfaces consumed by the coupon services.

Services depend only on these protocols; the storage backend (Supabase,
in-memory) is chosen by the caller. Implementations raise RepositoryError
for backend failures and never enforce business rules, except the
conditional write in `CouponRepository.save_if_unused`.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from domain.coupon import Coupon
from domain.purchase import PurchaseRecord
from domain.user import User


class UserRepository(Protocol):
    def find_by_id(self, user_id: str) -> Optional[User]: ...

    def find_all(self) -> List[User]: ...


class PurchaseRepository(Protocol):
    def find_by_user_id(self, user_id: str) -> List[PurchaseRecord]: ...


class CouponRepository(Protocol):
    def save(self, coupon: Coupon) -> None:
        """Insert or replace a coupon by coupon_id."""
        ...

    def save_if_unused(self, coupon: Coupon) -> bool:
        """
        Replace the stored coupon only if the stored copy is still unused.

        Returns False when the stored coupon is missing or already used, which
        is how concurrent redemptions of the same coupon lose the race.
        """
        ...

    def find_by_user_id(self, user_id: str) -> List[Coupon]: ...

    def find_all(self) -> List[Coupon]: ...


__all__ = ["UserRepository", "PurchaseRepository", "CouponRepository"]
