"""
Walk through coupon generation, redemption and statistics in memory.

Seeds one REGULAR, one PREMIUM and one VIP user, generates their coupons,
redeems one coupon twice (the second attempt is rejected), then prints the
statistics snapshot. No database is needed.

Usage:
    python scripts/demo_coupons.py
    python scripts/demo_coupons.py --featured-location Lyon --verbose
"""

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add parent directory to path so we can import from domain, services, etc.
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.coupon import CouponKind
from domain.errors import UserNotFoundError
from domain.purchase import PurchaseRecord
from domain.user import LoyaltyTier, User
from repositories.memory_repository import (
    InMemoryCouponRepository,
    InMemoryPurchaseRepository,
    InMemoryUserRepository,
)
from services.coupon_service import CouponService, EngineSettings
from services.notification_service import LoggingEmailNotifier


def seed_users(now: datetime) -> list[User]:
    return [
        User(
            user_id="1",
            email="john.doe@example.com",
            tier=LoyaltyTier.REGULAR,
            first_name="John",
            last_name="Doe",
            total_purchases=5,
            total_spent=Decimal("250.00"),
            last_purchase_date=now - timedelta(days=45),
            favorite_categories=frozenset({"BOOKS"}),
        ),
        User(
            user_id="2",
            email="jane.smith@example.com",
            tier=LoyaltyTier.PREMIUM,
            first_name="Jane",
            last_name="Smith",
            total_purchases=12,
            total_spent=Decimal("1200.00"),
            last_purchase_date=now - timedelta(days=3),
            favorite_categories=frozenset({"ELECTRONICS", "HOME"}),
        ),
        User(
            user_id="3",
            email="vip@example.com",
            tier=LoyaltyTier.VIP,
            first_name="VIP",
            last_name="Customer",
            total_purchases=40,
            total_spent=Decimal("2500.00"),
            last_purchase_date=now - timedelta(days=1),
            age=45,
            location="Nice",
        ),
    ]


def seed_purchases(now: datetime) -> list[PurchaseRecord]:
    return [
        PurchaseRecord("1", Decimal("120.00"), now - timedelta(days=60), "BOOKS", order_id="o-1"),
        PurchaseRecord("1", Decimal("130.00"), now - timedelta(days=45), "BOOKS", order_id="o-2"),
        PurchaseRecord("2", Decimal("700.00"), now - timedelta(days=10), "ELECTRONICS", order_id="o-3"),
        PurchaseRecord("2", Decimal("500.00"), now - timedelta(days=3), "HOME", order_id="o-4"),
        PurchaseRecord("3", Decimal("2500.00"), now - timedelta(days=1), "FASHION", order_id="o-5"),
    ]


def _format_value(kind: CouponKind, value: Decimal) -> str:
    if kind is CouponKind.PERCENTAGE:
        return f"{value}%"
    if kind is CouponKind.FIXED_AMOUNT:
        return f"{value} EUR"
    return "-"


def run_demo(featured_location: str) -> None:
    now = datetime.now(timezone.utc)
    users = seed_users(now)
    notifier = LoggingEmailNotifier()
    service = CouponService(
        InMemoryUserRepository(users),
        InMemoryPurchaseRepository(seed_purchases(now)),
        InMemoryCouponRepository(),
        notifier,
        settings=EngineSettings(featured_location=featured_location),
    )

    for user in users:
        print(f"\nGenerating coupons for {user.first_name} {user.last_name} ({user.tier.value})")
        coupons = service.generate_coupons_for_user(user.user_id)
        print(f"  {len(coupons)} coupon(s) generated")
        for index, coupon in enumerate(coupons, start=1):
            print(f"  Coupon {index}: {coupon.code}")
            print(f"    Type: {coupon.kind.value}")
            print(f"    Value: {_format_value(coupon.kind, coupon.value)}")
            print(f"    Min. order: {coupon.min_order_amount or 'none'}")
            print(f"    Valid until: {coupon.valid_until.date().isoformat()}")

    vip_coupon = service.list_coupons_for_user("3")[0]
    print(f"\nRedeeming {vip_coupon.code} for an order of 250.00")
    print(f"  First attempt:  {service.redeem_coupon(vip_coupon.code, '3', Decimal('250.00'))}")
    print(f"  Second attempt: {service.redeem_coupon(vip_coupon.code, '3', Decimal('250.00'))}")

    print("\nGenerating coupons for unknown user 'missing'")
    try:
        service.generate_coupons_for_user("missing")
    except UserNotFoundError as e:
        print(f"  [EXPECTED ERROR] {e}")

    stats = service.get_statistics()
    print("\nStatistics")
    print(f"  Users: {stats.users.total} total, {stats.users.active} active")
    print(f"  Users by tier: {', '.join(f'{t.value}={n}' for t, n in stats.users.by_tier.items())}")
    print(f"  Coupons: {stats.coupons.total} total, {stats.coupons.used} used ({stats.coupons.usage_rate}%)")
    print(f"  Coupons by kind: {', '.join(f'{k.value}={s.total}' for k, s in stats.coupons.by_kind.items())}")
    print(f"  Revenue: {stats.revenue.total} total, {stats.revenue.average_per_user} per user")
    print(f"\nEmails sent: {len(notifier.outbox)}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the coupon engine against in-memory data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--featured-location",
        default=EngineSettings.from_env().featured_location,
        help="Region that earns the VIP location coupon (default: COUPON_FEATURED_LOCATION or Nice)",
    )
    parser.add_argument("--verbose", action="store_true", help="Show engine log output")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    run_demo(args.featured_location)


if __name__ == "__main__":
    main()
