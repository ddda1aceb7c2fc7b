"""
Tests for the FastAPI layer.

The coupon service dependency is overridden with one built on in-memory
repositories, so these run without Supabase.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import NOW, RecordingNotifier, make_user
from api.dependencies import get_coupon_service
from api.main import app
from domain.user import LoyaltyTier
from repositories.memory_repository import (
    InMemoryCouponRepository,
    InMemoryPurchaseRepository,
    InMemoryUserRepository,
)
from services.coupon_service import CouponService


@pytest.fixture
def service() -> CouponService:
    users = InMemoryUserRepository([
        make_user("vip", LoyaltyTier.VIP, total_spent=Decimal("2500"), age=45, location="Nice"),
        make_user("premium", LoyaltyTier.PREMIUM, total_spent=Decimal("800")),
        make_user("gadgets", LoyaltyTier.PREMIUM, favorite_categories=frozenset({"ELECTRONICS"})),
        make_user("gold", "GOLD"),
        make_user("gone", LoyaltyTier.REGULAR, is_active=False),
    ])
    return CouponService(
        users,
        InMemoryPurchaseRepository(),
        InMemoryCouponRepository(),
        RecordingNotifier(),
        clock=lambda: NOW,
    )


@pytest.fixture
def client(service: CouponService):
    app.dependency_overrides[get_coupon_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestGenerateCoupons:
    def test_generates_coupons_for_vip(self, client: TestClient) -> None:
        response = client.post("/api/v1/users/vip/coupons")

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == "vip"
        assert len(body["coupons"]) == 7
        assert body["message"] == "7 coupons generated successfully"
        first = body["coupons"][0]
        assert first["kind"] == "PERCENTAGE"
        assert Decimal(first["value"]) == Decimal("25")
        assert first["applicable_categories"] is None
        assert first["is_used"] is False

    def test_category_restriction_is_serialized(self, client: TestClient) -> None:
        coupons = client.post("/api/v1/users/gadgets/coupons").json()["coupons"]

        restricted = [c for c in coupons if c["applicable_categories"] is not None]
        assert len(restricted) == 1
        assert restricted[0]["applicable_categories"] == ["ELECTRONICS"]
        assert Decimal(restricted[0]["value"]) == Decimal("25")

    @pytest.mark.parametrize("user_id", ["missing", "gone"])
    def test_missing_or_inactive_user_is_404(self, client: TestClient, user_id: str) -> None:
        response = client.post(f"/api/v1/users/{user_id}/coupons")

        assert response.status_code == 404
        assert user_id in response.json()["detail"]

    def test_unknown_tier_is_422(self, client: TestClient) -> None:
        response = client.post("/api/v1/users/gold/coupons")

        assert response.status_code == 422

    def test_listing_returns_issued_coupons(self, client: TestClient) -> None:
        client.post("/api/v1/users/premium/coupons")

        response = client.get("/api/v1/users/premium/coupons")

        assert response.status_code == 200
        assert [c["kind"] for c in response.json()] == ["PERCENTAGE", "FREE_SHIPPING"]


class TestRedeemCoupon:
    def test_second_redemption_is_rejected(self, client: TestClient) -> None:
        coupons = client.post("/api/v1/users/premium/coupons").json()["coupons"]
        payload = {"code": coupons[0]["code"], "user_id": "premium", "order_amount": "150.00"}

        first = client.post("/api/v1/coupons/redeem", json=payload)
        second = client.post("/api/v1/coupons/redeem", json=payload)

        assert first.status_code == 200
        assert first.json() == {"redeemed": True, "message": "Coupon redeemed successfully."}
        assert second.status_code == 200
        assert second.json()["redeemed"] is False

    def test_non_positive_order_amount_fails_validation(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/coupons/redeem",
            json={"code": "CPNAAAAAAAA", "user_id": "premium", "order_amount": "0"},
        )

        assert response.status_code == 422


def test_statistics(client: TestClient) -> None:
    coupons = client.post("/api/v1/users/premium/coupons").json()["coupons"]
    client.post(
        "/api/v1/coupons/redeem",
        json={"code": coupons[1]["code"], "user_id": "premium", "order_amount": "10"},
    )

    body = client.get("/api/v1/statistics").json()

    assert body["users"] == {
        "total": 5,
        "active": 4,
        "inactive": 1,
        "by_tier": {"REGULAR": 1, "PREMIUM": 2, "VIP": 1},
        "unknown_tier": 1,
    }
    assert body["coupons"]["total"] == 2
    assert body["coupons"]["used"] == 1
    assert body["coupons"]["usage_rate"] == 50.0
    assert body["coupons"]["by_kind"]["FREE_SHIPPING"]["usage_rate"] == 100.0
    assert Decimal(body["revenue"]["total"]) == Decimal("3300.00")


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
