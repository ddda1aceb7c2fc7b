"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from domain.coupon import Coupon
from services.statistics_service import StatisticsSnapshot


# ============================================================================
# Coupon Models
# ============================================================================

class CouponResponse(BaseModel):
    """Single coupon in API response."""
    coupon_id: str
    code: str
    kind: str  # "PERCENTAGE", "FIXED_AMOUNT", "FREE_SHIPPING", "BUY_ONE_GET_ONE"
    value: Decimal
    min_order_amount: Decimal
    max_discount_amount: Optional[Decimal] = None
    applicable_categories: Optional[List[str]] = None
    valid_from: datetime
    valid_until: datetime
    user_id: str
    is_used: bool
    usage_limit: int
    current_usage: int

    @classmethod
    def from_domain(cls, coupon: Coupon) -> "CouponResponse":
        categories = sorted(coupon.applicable_categories) if coupon.applicable_categories is not None else None
        return cls(
            coupon_id=coupon.coupon_id,
            code=coupon.code,
            kind=coupon.kind.value,
            value=coupon.value,
            min_order_amount=coupon.min_order_amount,
            max_discount_amount=coupon.max_discount_amount,
            applicable_categories=categories,
            valid_from=coupon.valid_from,
            valid_until=coupon.valid_until,
            user_id=coupon.user_id,
            is_used=coupon.is_used,
            usage_limit=coupon.usage_limit,
            current_usage=coupon.current_usage,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "coupon_id": "123e4567-e89b-12d3-a456-426614174000",
                "code": "CPN7K2Q9ZXA",
                "kind": "PERCENTAGE",
                "value": "25",
                "min_order_amount": "200",
                "max_discount_amount": "50",
                "applicable_categories": ["ELECTRONICS"],
                "valid_from": "2025-01-01T12:00:00Z",
                "valid_until": "2025-01-31T12:00:00Z",
                "user_id": "u-42",
                "is_used": False,
                "usage_limit": 1,
                "current_usage": 0
            }
        }


class GenerateCouponsResponse(BaseModel):
    """Response after coupon generation."""
    user_id: str
    coupons: List[CouponResponse]
    message: str


class RedeemCouponRequest(BaseModel):
    """Request to redeem a coupon against an order."""
    code: str = Field(..., min_length=1, description="Coupon code as issued")
    user_id: str = Field(..., min_length=1, description="Owner of the coupon")
    order_amount: Decimal = Field(..., gt=0, description="Order total before discount")

    class Config:
        json_schema_extra = {
            "example": {
                "code": "CPN7K2Q9ZXA",
                "user_id": "u-42",
                "order_amount": "250.00"
            }
        }


class RedeemCouponResponse(BaseModel):
    """Outcome of a redemption attempt."""
    redeemed: bool
    message: str


# ============================================================================
# Statistics Models
# ============================================================================

class UserStatisticsResponse(BaseModel):
    total: int
    active: int
    inactive: int
    by_tier: Dict[str, int]
    unknown_tier: int


class KindStatisticsResponse(BaseModel):
    total: int
    used: int
    usage_rate: float


class CouponStatisticsResponse(BaseModel):
    total: int
    used: int
    unused: int
    usage_rate: float
    by_kind: Dict[str, KindStatisticsResponse]


class RevenueStatisticsResponse(BaseModel):
    total: Decimal
    average_per_user: Decimal


class StatisticsResponse(BaseModel):
    """Snapshot of users, coupons and revenue."""
    users: UserStatisticsResponse
    coupons: CouponStatisticsResponse
    revenue: RevenueStatisticsResponse

    @classmethod
    def from_snapshot(cls, snapshot: StatisticsSnapshot) -> "StatisticsResponse":
        return cls(
            users=UserStatisticsResponse(
                total=snapshot.users.total,
                active=snapshot.users.active,
                inactive=snapshot.users.inactive,
                by_tier={tier.value: count for tier, count in snapshot.users.by_tier.items()},
                unknown_tier=snapshot.users.unknown_tier,
            ),
            coupons=CouponStatisticsResponse(
                total=snapshot.coupons.total,
                used=snapshot.coupons.used,
                unused=snapshot.coupons.unused,
                usage_rate=snapshot.coupons.usage_rate,
                by_kind={
                    kind.value: KindStatisticsResponse(
                        total=stats.total, used=stats.used, usage_rate=stats.usage_rate
                    )
                    for kind, stats in snapshot.coupons.by_kind.items()
                },
            ),
            revenue=RevenueStatisticsResponse(
                total=snapshot.revenue.total,
                average_per_user=snapshot.revenue.average_per_user,
            ),
        )


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Not found",
                "detail": "User not found or inactive: u-42",
                "status_code": 404
            }
        }
