"""
In-memory repositories.

Used by the demo script and by tests. Each repository guards its collection
with a lock so the conditional coupon write is atomic within a process.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional

from domain.coupon import Coupon
from domain.purchase import PurchaseRecord
from domain.user import User


class InMemoryUserRepository:
    def __init__(self, users: Iterable[User] = ()) -> None:
        self._users: Dict[str, User] = {u.user_id: u for u in users}

    def add(self, user: User) -> None:
        self._users[user.user_id] = user

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_all(self) -> List[User]:
        return list(self._users.values())


class InMemoryPurchaseRepository:
    def __init__(self, purchases: Iterable[PurchaseRecord] = ()) -> None:
        self._purchases: List[PurchaseRecord] = list(purchases)

    def add(self, purchase: PurchaseRecord) -> None:
        self._purchases.append(purchase)

    def find_by_user_id(self, user_id: str) -> List[PurchaseRecord]:
        return [p for p in self._purchases if p.user_id == user_id]


class InMemoryCouponRepository:
    def __init__(self, coupons: Iterable[Coupon] = ()) -> None:
        self._lock = Lock()
        # Insertion-ordered by coupon_id
        self._coupons: Dict[str, Coupon] = {c.coupon_id: c for c in coupons}

    def save(self, coupon: Coupon) -> None:
        with self._lock:
            self._coupons[coupon.coupon_id] = coupon

    def save_if_unused(self, coupon: Coupon) -> bool:
        with self._lock:
            stored = self._coupons.get(coupon.coupon_id)
            if stored is None or stored.is_used:
                return False
            self._coupons[coupon.coupon_id] = coupon
            return True

    def find_by_user_id(self, user_id: str) -> List[Coupon]:
        with self._lock:
            return [c for c in self._coupons.values() if c.user_id == user_id]

    def find_all(self) -> List[Coupon]:
        with self._lock:
            return list(self._coupons.values())


__all__ = [
    "InMemoryUserRepository",
    "InMemoryPurchaseRepository",
    "InMemoryCouponRepository",
]
