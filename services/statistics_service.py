"""
Statistics over users and coupons.

A pure read-side fold: nothing is cached or mutated, so the snapshot can be
recomputed on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable

from domain.coupon import Coupon, CouponKind
from domain.user import LoyaltyTier, User

_CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class UserStatistics:
    total: int
    active: int
    inactive: int
    by_tier: Dict[LoyaltyTier, int]
    unknown_tier: int  # tier outside LoyaltyTier


@dataclass(frozen=True, slots=True)
class KindStatistics:
    total: int
    used: int
    usage_rate: float  # percent


@dataclass(frozen=True, slots=True)
class CouponStatistics:
    total: int
    used: int
    unused: int
    usage_rate: float  # percent
    by_kind: Dict[CouponKind, KindStatistics]


@dataclass(frozen=True, slots=True)
class RevenueStatistics:
    total: Decimal
    average_per_user: Decimal


@dataclass(frozen=True, slots=True)
class StatisticsSnapshot:
    users: UserStatistics
    coupons: CouponStatistics
    revenue: RevenueStatistics


def _usage_rate(used: int, total: int) -> float:
    """Percentage of used coupons, rounded to 2 decimals (0 when total is 0)."""
    if total == 0:
        return 0.0
    return round(used / total * 100, 2)


def _to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def compute_statistics(users: Iterable[User], coupons: Iterable[Coupon]) -> StatisticsSnapshot:
    """
    Fold users and coupons into a StatisticsSnapshot.

    Invariants:
    - coupons.used <= coupons.total
    - users.active + users.inactive == users.total
    - sum(users.by_tier.values()) + users.unknown_tier == users.total
    """
    user_list = list(users)
    coupon_list = list(coupons)

    active = sum(1 for u in user_list if u.is_active)
    by_tier = {tier: sum(1 for u in user_list if u.tier == tier) for tier in LoyaltyTier}

    used = sum(1 for c in coupon_list if c.is_used)
    by_kind: Dict[CouponKind, KindStatistics] = {}
    for kind in CouponKind:
        of_kind = [c for c in coupon_list if c.kind is kind]
        kind_used = sum(1 for c in of_kind if c.is_used)
        by_kind[kind] = KindStatistics(
            total=len(of_kind),
            used=kind_used,
            usage_rate=_usage_rate(kind_used, len(of_kind)),
        )

    revenue = sum((u.total_spent for u in user_list), Decimal("0"))
    average = revenue / len(user_list) if user_list else Decimal("0")

    return StatisticsSnapshot(
        users=UserStatistics(
            total=len(user_list),
            active=active,
            inactive=len(user_list) - active,
            by_tier=by_tier,
            unknown_tier=len(user_list) - sum(by_tier.values()),
        ),
        coupons=CouponStatistics(
            total=len(coupon_list),
            used=used,
            unused=len(coupon_list) - used,
            usage_rate=_usage_rate(used, len(coupon_list)),
            by_kind=by_kind,
        ),
        revenue=RevenueStatistics(
            total=_to_cents(revenue),
            average_per_user=_to_cents(average),
        ),
    )


__all__ = [
    "UserStatistics",
    "KindStatistics",
    "CouponStatistics",
    "RevenueStatistics",
    "StatisticsSnapshot",
    "compute_statistics",
]
