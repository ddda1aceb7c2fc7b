"""
Statistics API Endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_coupon_service
from api.models import StatisticsResponse
from services.coupon_service import CouponService

router = APIRouter()


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Coupon Statistics",
    description="Counts by tier and coupon kind, usage rates and revenue totals, computed on request."
)
def get_statistics(service: CouponService = Depends(get_coupon_service)):
    try:
        snapshot = service.get_statistics()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to compute statistics: {str(e)}"
        )
    return StatisticsResponse.from_snapshot(snapshot)
