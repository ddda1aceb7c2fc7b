"""
Coupon factory.

Builds a single Coupon with the default validity window and a freshly sampled
human-readable code. Codes are NOT checked against previously issued coupons;
two issuances can collide (birthday risk over 36^8 codes). Callers that need
uniqueness within a batch pass `taken_codes`.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime
from decimal import Decimal
from typing import AbstractSet, FrozenSet, Optional
from uuid import uuid4

from domain.coupon import Coupon, CouponKind
from domain.tier_rules import CouponRequest
from domain.time import COUPON_VALIDITY, require_utc_timestamp

CODE_PREFIX: str = "CPN"
CODE_LENGTH: int = 8
_CODE_ALPHABET: str = string.ascii_uppercase + string.digits

# Percentage coupons are capped at twice their percentage, in currency units.
_PERCENTAGE_CAP_FACTOR: Decimal = Decimal("2")


def generate_coupon_code(taken_codes: AbstractSet[str] = frozenset()) -> str:
    """
    Sample a new code, re-sampling while it collides with `taken_codes`.

    Example:
        generate_coupon_code()
        # 'CPN7K2Q9ZXA'
    """
    while True:
        code = CODE_PREFIX + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(CODE_LENGTH))
        if code not in taken_codes:
            return code


def create_coupon(
    user_id: str,
    kind: CouponKind,
    value: Decimal = Decimal("0"),
    min_order_amount: Decimal = Decimal("0"),
    applicable_categories: Optional[FrozenSet[str]] = None,
    *,
    issued_at: datetime,
    code: Optional[str] = None,
) -> Coupon:
    """
    Create an unused coupon valid for 30 days from `issued_at`.

    Args:
        user_id: Owner of the coupon
        kind: Discount mechanism
        value: Percentage or amount (0 for kinds without a scalar discount)
        min_order_amount: Order threshold (0 means no threshold)
        applicable_categories: Optional category restriction
        issued_at: UTC timestamp of issuance
        code: Pre-generated code; a new one is sampled when omitted

    Returns:
        Coupon with is_used=False, current_usage=0, usage_limit=1
    """
    require_utc_timestamp("issued_at", issued_at)

    max_discount = value * _PERCENTAGE_CAP_FACTOR if kind is CouponKind.PERCENTAGE else None

    return Coupon(
        coupon_id=str(uuid4()),
        code=code or generate_coupon_code(),
        kind=kind,
        value=value,
        min_order_amount=min_order_amount,
        max_discount_amount=max_discount,
        applicable_categories=applicable_categories,
        valid_from=issued_at,
        valid_until=issued_at + COUPON_VALIDITY,
        user_id=user_id,
        created_at=issued_at,
        is_used=False,
        usage_limit=1,
        current_usage=0,
    )


def create_from_request(
    user_id: str,
    request: CouponRequest,
    *,
    issued_at: datetime,
    code: Optional[str] = None,
) -> Coupon:
    """Materialize a rule-set CouponRequest."""
    return create_coupon(
        user_id,
        request.kind,
        request.value,
        request.min_order_amount,
        request.applicable_categories,
        issued_at=issued_at,
        code=code,
    )


__all__ = [
    "CODE_PREFIX",
    "generate_coupon_code",
    "create_coupon",
    "create_from_request",
]
