"""
Coupon service: the engine's public entry point.

Composes generation, redemption and statistics over one set of repositories
and exposes the operations used by the API layer:
- generate_coupons_for_user(user_id)
- redeem_coupon(code, user_id, order_amount)
- get_statistics()
- list_coupons_for_user(user_id)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Mapping

from dotenv import load_dotenv

from domain.coupon import Coupon
from domain.tier_rules import DEFAULT_FEATURED_LOCATION, DEFAULT_TIER_RULES, RuleSettings, TierRule
from domain.time import utc_now
from repositories.interfaces import CouponRepository, PurchaseRepository, UserRepository
from services.generation_service import CouponGenerationService
from services.notification_service import LoggingEmailNotifier, NotificationPort
from services.redemption_service import CouponRedemptionService
from services.statistics_service import StatisticsSnapshot, compute_statistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """
    Runtime configuration read from the environment.

    COUPON_FEATURED_LOCATION: region that earns the VIP location coupon (default: Nice)
    """

    featured_location: str = DEFAULT_FEATURED_LOCATION

    @classmethod
    def from_env(cls) -> "EngineSettings":
        env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)
        return cls(featured_location=os.getenv("COUPON_FEATURED_LOCATION", DEFAULT_FEATURED_LOCATION))

    def rule_settings(self) -> RuleSettings:
        return RuleSettings(featured_location=self.featured_location)


class CouponService:
    def __init__(
        self,
        users: UserRepository,
        purchases: PurchaseRepository,
        coupons: CouponRepository,
        notifier: NotificationPort,
        *,
        settings: EngineSettings = EngineSettings(),
        rules: Mapping[str, TierRule] = DEFAULT_TIER_RULES,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._coupons = coupons
        self._generation = CouponGenerationService(
            users,
            purchases,
            coupons,
            notifier,
            settings=settings.rule_settings(),
            rules=rules,
            clock=clock,
        )
        self._redemption = CouponRedemptionService(coupons, users, notifier, clock=clock)

    def generate_coupons_for_user(self, user_id: str) -> List[Coupon]:
        return self._generation.generate_coupons_for_user(user_id)

    def redeem_coupon(self, code: str, user_id: str, order_amount: Decimal) -> bool:
        return self._redemption.redeem(code, user_id, order_amount)

    def get_statistics(self) -> StatisticsSnapshot:
        return compute_statistics(self._users.find_all(), self._coupons.find_all())

    def list_coupons_for_user(self, user_id: str) -> List[Coupon]:
        return self._coupons.find_by_user_id(user_id)


def build_supabase_service() -> CouponService:
    """
    Wire the service against the Supabase repositories.

    Requires SUPABASE_URL and SUPABASE_KEY (see repositories/client.py).
    """
    from repositories.coupon_repository import SupabaseCouponRepository
    from repositories.purchase_repository import SupabasePurchaseRepository
    from repositories.user_repository import SupabaseUserRepository

    settings = EngineSettings.from_env()
    logger.info(f"Coupon service configured (featured location: {settings.featured_location})")
    return CouponService(
        SupabaseUserRepository(),
        SupabasePurchaseRepository(),
        SupabaseCouponRepository(),
        LoggingEmailNotifier(),
        settings=settings,
    )


__all__ = ["EngineSettings", "CouponService", "build_supabase_service"]
