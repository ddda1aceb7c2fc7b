"""
User repository (persistence).

Read-only access to coupon recipients stored in Supabase. Users are written by
an upstream system; the coupon engine never updates them.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from domain.user import User
from repositories.serialization import (
    execute,
    parse_categories,
    parse_decimal,
    parse_optional_datetime,
)

# Supabase table name for users.
# Keep this aligned with your database schema.
_USERS_TABLE: str = "users"


def _row_to_user(row: Mapping[str, Any]) -> User:
    """Convert a Supabase row into a User."""

    age = row.get("age")
    return User(
        user_id=str(row["user_id"]),
        email=str(row["email"]),
        tier=str(row["tier"]),
        is_active=bool(row.get("is_active", True)),
        total_purchases=int(row.get("total_purchases") or 0),
        total_spent=parse_decimal(row.get("total_spent")),
        last_purchase_date=parse_optional_datetime(row.get("last_purchase_date_utc")),
        favorite_categories=parse_categories(row.get("favorite_categories")),
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        age=int(age) if age is not None else None,
        location=row.get("location"),
    )


class SupabaseUserRepository:
    """
    User lookups against the `users` table.

    Example:
        repo = SupabaseUserRepository()
        user = repo.find_by_id("u-123")
        if user and user.can_receive_coupons():
            ...
    """

    def __init__(self, client: Any = None) -> None:
        if client is None:
            from repositories.client import supabase

            client = supabase
        self._client = client

    def find_by_id(self, user_id: str) -> Optional[User]:
        rows = execute(
            self._client.table(_USERS_TABLE).select("*").eq("user_id", user_id).limit(1),
            "fetch user",
        )
        if not rows:
            return None
        return _row_to_user(rows[0])

    def find_all(self) -> List[User]:
        rows = execute(self._client.table(_USERS_TABLE).select("*"), "list users")
        return [_row_to_user(row) for row in rows]


__all__ = ["SupabaseUserRepository"]
