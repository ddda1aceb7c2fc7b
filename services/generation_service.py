"""
Coupon generation service.

Process for one user:
1. Load the user; missing and inactive users are rejected identically
2. Compute derived metrics from purchase history
3. Resolve coupon requests from the tier rule set
4. Build each coupon with the factory (codes unique within the batch)
5. Persist each coupon individually
6. Send one notification with all codes

Generation is additive: prior coupons of the user are never touched.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Mapping, Set

from domain.coupon import Coupon
from domain.errors import UserNotFoundError
from domain.metrics import compute_derived_metrics
from domain.tier_rules import DEFAULT_TIER_RULES, RuleSettings, TierRule, evaluate_tier_rules
from domain.time import utc_now
from repositories.interfaces import CouponRepository, PurchaseRepository, UserRepository
from services.coupon_factory import create_from_request, generate_coupon_code
from services.notification_service import NotificationPort

logger = logging.getLogger(__name__)


class CouponGenerationService:
    def __init__(
        self,
        users: UserRepository,
        purchases: PurchaseRepository,
        coupons: CouponRepository,
        notifier: NotificationPort,
        *,
        settings: RuleSettings = RuleSettings(),
        rules: Mapping[str, TierRule] = DEFAULT_TIER_RULES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._purchases = purchases
        self._coupons = coupons
        self._notifier = notifier
        self._settings = settings
        self._rules = rules
        self._clock = clock

    def generate_coupons_for_user(self, user_id: str) -> List[Coupon]:
        """
        Generate, persist and announce the coupons a user qualifies for.

        Returns:
            Coupons in rule order (possibly empty)

        Raises:
            UserNotFoundError: no active user with this id
            InvalidProfileError: the user's tier has no rule set
            RepositoryError: a repository call failed
        """
        user = self._users.find_by_id(user_id)
        if user is None or not user.can_receive_coupons():
            logger.warning(
                f"User {user_id} not found or inactive",
                extra={"user_id": user_id, "action": "COUPON_GENERATION_ERROR"},
            )
            raise UserNotFoundError(user_id)

        now = self._clock()
        metrics = compute_derived_metrics(user, self._purchases.find_by_user_id(user_id), now)
        requests = evaluate_tier_rules(user, metrics, settings=self._settings, rules=self._rules)

        taken: Set[str] = set()
        generated: List[Coupon] = []
        for request in requests:
            code = generate_coupon_code(taken)
            taken.add(code)
            coupon = create_from_request(user.user_id, request, issued_at=now, code=code)
            logger.debug(
                f"Created {coupon.kind.value} coupon {coupon.code}",
                extra={"user_id": user_id, "coupon_code": coupon.code, "value": str(coupon.value)},
            )
            generated.append(coupon)

        for coupon in generated:
            self._coupons.save(coupon)

        self._notify_issued(user.email, [c.code for c in generated])

        logger.info(
            f"Generated {len(generated)} coupons for user {user_id}",
            extra={
                "user_id": user_id,
                "tier": str(user.tier),
                "coupon_count": len(generated),
                "action": "COUPON_GENERATION_SUCCESS",
            },
        )
        return generated

    def _notify_issued(self, email: str, codes: List[str]) -> None:
        # Coupons are already persisted; delivery problems must not undo them.
        try:
            self._notifier.send_coupon_issued(email, codes)
        except Exception:
            logger.warning(
                f"Failed to send coupon notification to {email}",
                exc_info=True,
                extra={"email_to": email, "coupon_codes": codes},
            )


__all__ = ["CouponGenerationService"]
