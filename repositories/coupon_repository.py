"""
Coupon repository (persistence).

This module provides *only* persistence operations for the Coupon domain
entity. It does not validate redemption rules; it only enforces the
conditional write that keeps the UNUSED -> USED transition atomic.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from domain.coupon import Coupon, CouponKind
from repositories.serialization import (
    execute,
    parse_categories,
    parse_decimal,
    parse_utc_datetime,
    to_iso_utc,
)

# Supabase table name for coupons.
# Keep this aligned with your database schema.
_COUPONS_TABLE: str = "coupons"


def _coupon_to_row(coupon: Coupon) -> dict[str, Any]:
    categories = sorted(coupon.applicable_categories) if coupon.applicable_categories is not None else None
    max_discount = str(coupon.max_discount_amount) if coupon.max_discount_amount is not None else None
    return {
        "coupon_id": coupon.coupon_id,
        "code": coupon.code,
        "kind": coupon.kind.value,
        "value": str(coupon.value),
        "min_order_amount": str(coupon.min_order_amount),
        "max_discount_amount": max_discount,
        "applicable_categories": categories,
        "valid_from_utc": to_iso_utc(coupon.valid_from, name="valid_from"),
        "valid_until_utc": to_iso_utc(coupon.valid_until, name="valid_until"),
        "user_id": coupon.user_id,
        "is_used": coupon.is_used,
        "usage_limit": coupon.usage_limit,
        "current_usage": coupon.current_usage,
        "created_at_utc": to_iso_utc(coupon.created_at, name="created_at"),
    }


def _row_to_coupon(row: Mapping[str, Any]) -> Coupon:
    """Convert a Supabase row into a Coupon."""

    max_discount = row.get("max_discount_amount")
    categories = row.get("applicable_categories")
    return Coupon(
        coupon_id=str(row["coupon_id"]),
        code=str(row["code"]),
        kind=CouponKind(str(row["kind"])),
        value=parse_decimal(row.get("value")),
        min_order_amount=parse_decimal(row.get("min_order_amount")),
        max_discount_amount=parse_decimal(max_discount) if max_discount is not None else None,
        applicable_categories=parse_categories(categories) if categories is not None else None,
        valid_from=parse_utc_datetime(row["valid_from_utc"]),
        valid_until=parse_utc_datetime(row["valid_until_utc"]),
        user_id=str(row["user_id"]),
        is_used=bool(row.get("is_used", False)),
        usage_limit=int(row.get("usage_limit") or 1),
        current_usage=int(row.get("current_usage") or 0),
        created_at=parse_utc_datetime(row["created_at_utc"]),
    )


class SupabaseCouponRepository:
    def __init__(self, client: Any = None) -> None:
        if client is None:
            from repositories.client import supabase

            client = supabase
        self._client = client

    def save(self, coupon: Coupon) -> None:
        """Insert the coupon, or replace the stored row with the same coupon_id."""

        execute(
            self._client.table(_COUPONS_TABLE).upsert(_coupon_to_row(coupon), on_conflict="coupon_id"),
            "save coupon",
        )

    def save_if_unused(self, coupon: Coupon) -> bool:
        """
        Replace the stored coupon only while its stored is_used is still false.

        The condition is evaluated by the database in the same UPDATE, so two
        concurrent redemptions cannot both succeed.
        """

        rows = execute(
            self._client.table(_COUPONS_TABLE)
            .update(_coupon_to_row(coupon))
            .eq("coupon_id", coupon.coupon_id)
            .eq("is_used", False),
            "redeem coupon",
        )
        # No rows: either the coupon vanished or another caller redeemed it first.
        return bool(rows)

    def find_by_user_id(self, user_id: str) -> List[Coupon]:
        rows = execute(
            self._client.table(_COUPONS_TABLE).select("*").eq("user_id", user_id).order("created_at_utc"),
            "list coupons",
        )
        return [_row_to_coupon(row) for row in rows]

    def find_all(self) -> List[Coupon]:
        rows = execute(self._client.table(_COUPONS_TABLE).select("*"), "list coupons")
        return [_row_to_coupon(row) for row in rows]


__all__ = ["SupabaseCouponRepository"]
