"""
FastAPI dependencies.

The coupon service is built once per process against Supabase. Tests replace
it through `app.dependency_overrides[get_coupon_service]`.
"""

from __future__ import annotations

from functools import lru_cache

from services.coupon_service import CouponService, build_supabase_service


@lru_cache(maxsize=1)
def get_coupon_service() -> CouponService:
    return build_supabase_service()
