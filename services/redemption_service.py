"""
Coupon redemption service.

Validates a submitted code against the stored coupon and an order amount, then
performs the one-way UNUSED -> USED transition.

Ordinary business failures (unknown code, already used, expired, order too
low, lost race) return False. Only infrastructure faults raise.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from domain.coupon import Coupon
from domain.time import utc_now
from repositories.interfaces import CouponRepository, UserRepository
from services.notification_service import NotificationPort

logger = logging.getLogger(__name__)


class CouponRedemptionService:
    def __init__(
        self,
        coupons: CouponRepository,
        users: UserRepository,
        notifier: NotificationPort,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._coupons = coupons
        self._users = users
        self._notifier = notifier
        self._clock = clock

    def _find(self, code: str, user_id: str) -> Optional[Coupon]:
        for coupon in self._coupons.find_by_user_id(user_id):
            if coupon.code == code:
                return coupon
        return None

    def _reject(self, reason: str, message: str, code: str, user_id: str, **details: object) -> bool:
        logger.warning(
            message,
            extra={"coupon_code": code, "user_id": user_id, "action": reason, **details},
        )
        return False

    def redeem(self, code: str, user_id: str, order_amount: Decimal) -> bool:
        """
        Redeem a coupon for an order.

        A non-finite order amount (NaN, Infinity) is rejected before any lookup.

        Validation order (first failure wins):
        1. Coupon exists for (code, user_id)
        2. Coupon not already used
        3. Not past valid_until
        4. order_amount >= min_order_amount (when set)

        Returns:
            True if the coupon was consumed by this call
        """
        order_amount = Decimal(str(order_amount))
        if not order_amount.is_finite():
            return self._reject(
                "INVALID_ORDER_AMOUNT", f"Order amount is not a finite number: {order_amount}", code, user_id
            )

        coupon = self._find(code, user_id)
        if coupon is None:
            return self._reject(
                "COUPON_VALIDATION_FAILED", f"Coupon {code} not found for user {user_id}", code, user_id
            )

        if coupon.is_used:
            return self._reject("COUPON_ALREADY_USED", f"Coupon {code} already used", code, user_id)

        if coupon.is_expired(self._clock()):
            return self._reject("COUPON_EXPIRED", f"Coupon {code} expired", code, user_id)

        if not coupon.meets_min_order(order_amount):
            return self._reject(
                "ORDER_AMOUNT_TOO_LOW",
                f"Order amount too low for coupon {code}",
                code,
                user_id,
                order_amount=str(order_amount),
                min_order_amount=str(coupon.min_order_amount),
            )

        # Conditional write: only one concurrent caller can flip the stored record.
        if not self._coupons.save_if_unused(coupon.redeemed()):
            return self._reject(
                "COUPON_ALREADY_USED", f"Coupon {code} was redeemed concurrently", code, user_id
            )

        logger.info(
            f"Coupon {code} used successfully",
            extra={
                "coupon_code": code,
                "user_id": user_id,
                "order_amount": str(order_amount),
                "kind": coupon.kind.value,
                "action": "COUPON_USED",
            },
        )
        self._notify_redeemed(code, user_id)
        return True

    def _notify_redeemed(self, code: str, user_id: str) -> None:
        # The redemption is persisted; a lookup or delivery failure is only logged.
        try:
            user = self._users.find_by_id(user_id)
            if user is not None:
                self._notifier.send_coupon_redeemed(user.email, code)
        except Exception:
            logger.warning(
                f"Failed to send redemption notification for coupon {code}",
                exc_info=True,
                extra={"coupon_code": code, "user_id": user_id},
            )


__all__ = ["CouponRedemptionService"]
