"""
Tests for the Supabase-backed repositories.

A fake client stands in for supabase-py: it records the query chain and
returns canned rows, so row mapping and query shape can be checked offline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, List

import pytest

from conftest import NOW
from domain.coupon import CouponKind
from domain.errors import RepositoryError
from repositories.coupon_repository import SupabaseCouponRepository
from repositories.purchase_repository import SupabasePurchaseRepository
from repositories.user_repository import SupabaseUserRepository
from services.coupon_factory import create_coupon


class FakeQuery:
    def __init__(self, client: "FakeClient", table: str) -> None:
        self.client = client
        self.calls: List[tuple] = [("table", table)]

    def __getattr__(self, name: str):
        def step(*args: Any, **kwargs: Any) -> "FakeQuery":
            self.calls.append((name, *args))
            return self

        return step

    def execute(self) -> SimpleNamespace:
        self.client.executed.append(self.calls)
        return SimpleNamespace(data=self.client.rows, error=self.client.error)


class FakeClient:
    def __init__(self, rows=None, error=None) -> None:
        self.rows = rows or []
        self.error = error
        self.executed: List[List[tuple]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


USER_ROW = {
    "user_id": "u-1",
    "email": "u-1@example.com",
    "tier": "PREMIUM",
    "is_active": True,
    "total_purchases": 12,
    "total_spent": 812.5,
    "last_purchase_date_utc": "2025-05-30T08:00:00Z",
    "favorite_categories": ["ELECTRONICS", "HOME"],
    "first_name": "Jane",
    "last_name": "Smith",
    "age": 38,
    "location": "Nice",
}


def test_user_row_mapping() -> None:
    user = SupabaseUserRepository(FakeClient([USER_ROW])).find_by_id("u-1")

    assert user is not None
    assert user.tier == "PREMIUM"
    assert user.total_spent == Decimal("812.5")
    assert user.last_purchase_date == datetime(2025, 5, 30, 8, 0, tzinfo=timezone.utc)
    assert user.favorite_categories == frozenset({"ELECTRONICS", "HOME"})
    assert user.age == 38


def test_user_not_found_returns_none() -> None:
    assert SupabaseUserRepository(FakeClient([])).find_by_id("nobody") is None


def test_unknown_tier_is_loaded_as_is() -> None:
    row = {**USER_ROW, "tier": "PLATINUM", "last_purchase_date_utc": None, "age": None}

    user = SupabaseUserRepository(FakeClient([row])).find_by_id("u-1")

    assert user.tier == "PLATINUM"
    assert user.last_purchase_date is None
    assert user.age is None


def test_purchase_query_filters_by_user() -> None:
    client = FakeClient([
        {"user_id": "u-1", "amount": "42.10", "purchased_at_utc": "2025-05-01T00:00:00+00:00", "category": "BOOKS"},
    ])

    purchases = SupabasePurchaseRepository(client).find_by_user_id("u-1")

    assert purchases[0].amount == Decimal("42.10")
    assert ("eq", "user_id", "u-1") in client.executed[0]


def test_backend_error_raises_repository_error() -> None:
    with pytest.raises(RepositoryError):
        SupabaseUserRepository(FakeClient(error="connection refused")).find_all()


def test_coupon_round_trips_through_row_mapping() -> None:
    coupon = create_coupon(
        "u-1",
        CouponKind.PERCENTAGE,
        Decimal("25"),
        Decimal("200"),
        frozenset({"ELECTRONICS"}),
        issued_at=NOW,
    )
    client = FakeClient()
    repo = SupabaseCouponRepository(client)

    repo.save(coupon)
    saved_row = next(call for call in client.executed[0] if call[0] == "upsert")[1]
    client.rows = [saved_row]

    assert repo.find_by_user_id("u-1") == [coupon]


def test_save_if_unused_uses_conditional_update() -> None:
    coupon = create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=NOW).redeemed()
    client = FakeClient(rows=[{"coupon_id": coupon.coupon_id}])

    assert SupabaseCouponRepository(client).save_if_unused(coupon) is True

    calls = client.executed[0]
    assert calls[1][0] == "update"
    assert ("eq", "coupon_id", coupon.coupon_id) in calls
    assert ("eq", "is_used", False) in calls


def test_save_if_unused_reports_lost_race() -> None:
    coupon = create_coupon("u-1", CouponKind.FREE_SHIPPING, issued_at=NOW).redeemed()

    assert SupabaseCouponRepository(FakeClient(rows=[])).save_if_unused(coupon) is False


def test_postgrest_api_error_is_wrapped() -> None:
    from postgrest.exceptions import APIError

    class RaisingClient(FakeClient):
        def table(self, name: str) -> FakeQuery:
            query = FakeQuery(self, name)

            def fail() -> None:
                raise APIError({"message": "permission denied", "code": "42501"})

            query.execute = fail
            return query

    with pytest.raises(RepositoryError, match="list coupons"):
        SupabaseCouponRepository(RaisingClient()).find_all()
