"""
Coupons API Endpoints.

Endpoints for generating a user's coupons, listing them, and redeeming a
coupon against an order.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_coupon_service
from api.models import (
    CouponResponse,
    ErrorResponse,
    GenerateCouponsResponse,
    RedeemCouponRequest,
    RedeemCouponResponse,
)
from domain.errors import InvalidProfileError, UserNotFoundError
from services.coupon_service import CouponService

router = APIRouter()


@router.post(
    "/users/{user_id}/coupons",
    response_model=GenerateCouponsResponse,
    status_code=201,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Generate Coupons",
    description="Generate every coupon the user qualifies for based on loyalty tier and purchase history."
)
def generate_coupons(user_id: str, service: CouponService = Depends(get_coupon_service)):
    """
    Generate coupons for a user.

    **Process:**
    1. Validates the user exists and is active
    2. Computes spend and recency from purchase history
    3. Applies the rules of the user's loyalty tier
    4. Persists each coupon and emails the codes to the user

    Calling this again issues a new set of coupons; earlier coupons are kept.
    """
    try:
        coupons = service.generate_coupons_for_user(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate coupons: {str(e)}"
        )

    return GenerateCouponsResponse(
        user_id=user_id,
        coupons=[CouponResponse.from_domain(c) for c in coupons],
        message=f"{len(coupons)} coupons generated successfully",
    )


@router.get(
    "/users/{user_id}/coupons",
    response_model=list[CouponResponse],
    summary="List User Coupons",
    description="List every coupon issued to a user, used or not."
)
def list_user_coupons(user_id: str, service: CouponService = Depends(get_coupon_service)):
    try:
        coupons = service.list_coupons_for_user(user_id)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to list coupons: {str(e)}"
        )
    return [CouponResponse.from_domain(c) for c in coupons]


@router.post(
    "/coupons/redeem",
    response_model=RedeemCouponResponse,
    summary="Redeem Coupon",
    description="Validate a coupon code against an order amount and consume its single use."
)
def redeem_coupon(request: RedeemCouponRequest, service: CouponService = Depends(get_coupon_service)):
    """
    Redeem a coupon.

    A coupon that is unknown for this user, already used, expired, or whose
    minimum order is not met is *not* an error: the response carries
    `redeemed: false`.

    **Example request:**
    ```json
    {
      "code": "CPN7K2Q9ZXA",
      "user_id": "u-42",
      "order_amount": "250.00"
    }
    ```
    """
    try:
        redeemed = service.redeem_coupon(request.code, request.user_id, request.order_amount)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to redeem coupon: {str(e)}"
        )

    message = "Coupon redeemed successfully." if redeemed else "Coupon could not be redeemed."
    return RedeemCouponResponse(redeemed=redeemed, message=message)
