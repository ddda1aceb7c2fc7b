"""
Domain: Tier rule set.

Each loyalty tier maps to a pure function that turns a user snapshot and its
derived metrics into an ordered list of coupon requests. Conditions inside a
tier are independent, so one call can yield several coupons. Requests are
emitted in rule order, which is the order codes appear in notifications.

New tiers are added by registering a function in a rule mapping; existing
rule functions are never edited for that.

REGULAR and PREMIUM spend thresholds use the spend derived from purchase
records. The VIP high-spend threshold uses the accumulated total on the user
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, FrozenSet, List, Mapping, Optional

from .coupon import CouponKind
from .errors import InvalidProfileError
from .metrics import DerivedMetrics
from .user import LoyaltyTier, User

ELECTRONICS: str = "ELECTRONICS"
DEFAULT_FEATURED_LOCATION: str = "Nice"


@dataclass(frozen=True, slots=True)
class CouponRequest:
    """What the rule set asks the factory to build."""

    kind: CouponKind
    value: Decimal = Decimal("0")
    min_order_amount: Decimal = Decimal("0")
    applicable_categories: Optional[FrozenSet[str]] = None


@dataclass(frozen=True, slots=True)
class RuleSettings:
    """Externally configured values referenced by the rules."""

    featured_location: str = DEFAULT_FEATURED_LOCATION


TierRule = Callable[[User, DerivedMetrics, RuleSettings], List[CouponRequest]]


def _percentage(value: int, min_order: int, categories: Optional[FrozenSet[str]] = None) -> CouponRequest:
    return CouponRequest(CouponKind.PERCENTAGE, Decimal(value), Decimal(min_order), categories)


def _fixed(value: int, min_order: int) -> CouponRequest:
    return CouponRequest(CouponKind.FIXED_AMOUNT, Decimal(value), Decimal(min_order))


def _free_shipping() -> CouponRequest:
    return CouponRequest(CouponKind.FREE_SHIPPING)


def _buy_one_get_one(min_order: int) -> CouponRequest:
    return CouponRequest(CouponKind.BUY_ONE_GET_ONE, Decimal("0"), Decimal(min_order))


def regular_rules(user: User, metrics: DerivedMetrics, settings: RuleSettings) -> List[CouponRequest]:
    requests: List[CouponRequest] = []
    if user.total_purchases >= 3:
        requests.append(_percentage(10, 50))
    if metrics.total_spent > 100:
        requests.append(_fixed(15, 100))
    if metrics.days_since_last_purchase > 30:
        requests.append(_free_shipping())
    return requests


def premium_rules(user: User, metrics: DerivedMetrics, settings: RuleSettings) -> List[CouponRequest]:
    requests: List[CouponRequest] = [_percentage(15, 100)]
    if user.total_purchases >= 10:
        requests.append(_percentage(20, 150))
    if metrics.total_spent > 500:
        requests.append(_fixed(50, 200))
    requests.append(_free_shipping())
    if ELECTRONICS in user.favorite_categories:
        requests.append(_percentage(25, 200, frozenset({ELECTRONICS})))
    return requests


def vip_rules(user: User, metrics: DerivedMetrics, settings: RuleSettings) -> List[CouponRequest]:
    requests: List[CouponRequest] = [
        _percentage(25, 200),
        _fixed(100, 500),
        _free_shipping(),
        _buy_one_get_one(100),
    ]
    if user.total_spent > 2000:
        requests.append(_percentage(30, 500))
    if user.age is not None and user.age > 40:
        requests.append(_percentage(20, 100))
    if user.location == settings.featured_location:
        requests.append(_percentage(15, 100))
    return requests


DEFAULT_TIER_RULES: Mapping[str, TierRule] = {
    LoyaltyTier.REGULAR: regular_rules,
    LoyaltyTier.PREMIUM: premium_rules,
    LoyaltyTier.VIP: vip_rules,
}


def evaluate_tier_rules(
    user: User,
    metrics: DerivedMetrics,
    *,
    settings: RuleSettings = RuleSettings(),
    rules: Mapping[str, TierRule] = DEFAULT_TIER_RULES,
) -> List[CouponRequest]:
    """
    Resolve the coupon requests a user qualifies for.

    Raises:
        InvalidProfileError: if no rule function is registered for the user's tier
    """

    rule = rules.get(user.tier)
    if rule is None:
        raise InvalidProfileError(user.user_id, str(user.tier))
    return rule(user, metrics, settings)
