"""
Domain errors for coupon generation.

Business rejections during redemption are *not* errors; they are returned as
``False``. The exceptions here signal invalid input that the caller must see.
"""

from __future__ import annotations


class CouponEngineError(Exception):
    """Base class for hard failures raised by the coupon engine."""


class UserNotFoundError(CouponEngineError):
    """Raised when no active user exists for the requested id."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found or inactive: {user_id}")


class InvalidProfileError(CouponEngineError):
    """Raised when a user's loyalty tier has no registered rule set."""

    def __init__(self, user_id: str, tier: str):
        self.user_id = user_id
        self.tier = tier
        super().__init__(f"Unknown loyalty tier {tier!r} for user {user_id}")


class RepositoryError(RuntimeError):
    """Raised when a persistence backend fails (infrastructure fault)."""
