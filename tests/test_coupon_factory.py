"""
Tests for `services/coupon_factory.py`.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import NOW
from domain.coupon import CouponKind
from domain.tier_rules import CouponRequest
from services.coupon_factory import (
    CODE_PREFIX,
    create_coupon,
    create_from_request,
    generate_coupon_code,
)

CODE_PATTERN = re.compile(rf"^{CODE_PREFIX}[A-Z0-9]{{8}}$")


def test_create_coupon_defaults() -> None:
    coupon = create_coupon("u-1", CouponKind.FIXED_AMOUNT, Decimal("15"), Decimal("100"), issued_at=NOW)

    assert coupon.user_id == "u-1"
    assert coupon.kind is CouponKind.FIXED_AMOUNT
    assert coupon.value == Decimal("15")
    assert coupon.min_order_amount == Decimal("100")
    assert coupon.valid_from == NOW
    assert coupon.created_at == NOW
    assert coupon.valid_until == NOW + timedelta(days=30)
    assert coupon.is_used is False
    assert coupon.current_usage == 0
    assert coupon.usage_limit == 1
    assert coupon.applicable_categories is None
    assert coupon.max_discount_amount is None
    assert CODE_PATTERN.match(coupon.code)


def test_percentage_coupon_is_capped_at_twice_its_value() -> None:
    coupon = create_coupon("u-1", CouponKind.PERCENTAGE, Decimal("25"), Decimal("200"), issued_at=NOW)

    assert coupon.max_discount_amount == Decimal("50")


def test_free_shipping_defaults_to_zero_value_and_threshold() -> None:
    coupon = create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=NOW)

    assert coupon.value == Decimal("0")
    assert coupon.min_order_amount == Decimal("0")


def test_create_from_request_keeps_category_restriction() -> None:
    request = CouponRequest(
        CouponKind.PERCENTAGE, Decimal("25"), Decimal("200"), frozenset({"ELECTRONICS"})
    )

    coupon = create_from_request("u-1", request, issued_at=NOW, code="CPNFIXED001")

    assert coupon.code == "CPNFIXED001"
    assert coupon.applicable_categories == frozenset({"ELECTRONICS"})


def test_each_coupon_gets_its_own_id_and_code() -> None:
    a = create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=NOW)
    b = create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=NOW)

    assert a.coupon_id != b.coupon_id
    assert a.code != b.code


def test_issued_at_must_be_utc() -> None:
    with pytest.raises(ValueError):
        create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=datetime(2025, 1, 1))


def test_generate_coupon_code_resamples_on_collision(monkeypatch: pytest.MonkeyPatch) -> None:
    """A code already taken in the batch is never returned."""
    samples = iter("AAAAAAAA" + "AAAAAAAA" + "BBBBBBBB")
    monkeypatch.setattr("services.coupon_factory.secrets.choice", lambda alphabet: next(samples))

    code = generate_coupon_code({"CPNAAAAAAAA"})

    assert code == "CPNBBBBBBBB"
