"""
Purchase repository (persistence).

Read-only access to purchase history. It does not aggregate anything; derived
metrics are computed in the domain layer.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from domain.purchase import PurchaseRecord
from repositories.serialization import execute, parse_decimal, parse_utc_datetime

_PURCHASES_TABLE: str = "purchases"


def _row_to_purchase(row: Mapping[str, Any]) -> PurchaseRecord:
    """Convert a Supabase row into a PurchaseRecord."""

    product_count = row.get("product_count")
    return PurchaseRecord(
        user_id=str(row["user_id"]),
        amount=parse_decimal(row["amount"]),
        purchased_at=parse_utc_datetime(row["purchased_at_utc"]),
        category=str(row.get("category") or ""),
        order_id=row.get("order_id"),
        product_count=int(product_count) if product_count is not None else None,
    )


class SupabasePurchaseRepository:
    def __init__(self, client: Any = None) -> None:
        if client is None:
            from repositories.client import supabase

            client = supabase
        self._client = client

    def find_by_user_id(self, user_id: str) -> List[PurchaseRecord]:
        """
        Retrieve all purchases for a user.

        Returns:
            List[PurchaseRecord] (possibly empty)
        """
        rows = execute(
            self._client.table(_PURCHASES_TABLE).select("*").eq("user_id", user_id),
            "list purchases",
        )
        return [_row_to_purchase(row) for row in rows]


__all__ = ["SupabasePurchaseRepository"]
