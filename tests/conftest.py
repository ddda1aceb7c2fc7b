"""
Pytest configuration and shared fixtures.

Adds the project root to the Python path so tests can import domain,
repositories and services, and provides in-memory collaborators so engines
can be tested without Supabase.
"""

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.user import LoyaltyTier, User  # noqa: E402
from repositories.memory_repository import (  # noqa: E402
    InMemoryCouponRepository,
    InMemoryPurchaseRepository,
    InMemoryUserRepository,
)

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    """Notifier fake that records every call."""

    def __init__(self) -> None:
        self.issued: List[Tuple[str, List[str]]] = []
        self.redeemed: List[Tuple[str, str]] = []

    def send_coupon_issued(self, email: str, codes: Sequence[str]) -> None:
        self.issued.append((email, list(codes)))

    def send_coupon_redeemed(self, email: str, code: str) -> None:
        self.redeemed.append((email, code))


class FailingNotifier:
    """Notifier fake whose delivery always fails."""

    def send_coupon_issued(self, email: str, codes: Sequence[str]) -> None:
        raise ConnectionError("SMTP unreachable")

    def send_coupon_redeemed(self, email: str, code: str) -> None:
        raise ConnectionError("SMTP unreachable")


def make_user(user_id: str = "u-1", tier: str = LoyaltyTier.REGULAR, **overrides) -> User:
    fields = {
        "user_id": user_id,
        "email": f"{user_id}@example.com",
        "tier": tier,
        "is_active": True,
        "total_purchases": 0,
        "total_spent": Decimal("0"),
    }
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def purchases() -> InMemoryPurchaseRepository:
    return InMemoryPurchaseRepository()


@pytest.fixture
def coupons() -> InMemoryCouponRepository:
    return InMemoryCouponRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
