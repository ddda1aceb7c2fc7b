"""
Shared helpers for the Supabase-backed repositories.

Covers timestamp/decimal (de)serialization and uniform handling of failed
queries, so every repository surfaces backend faults as RepositoryError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, FrozenSet, List, Mapping, Optional

import httpx
from postgrest.exceptions import APIError

from domain.errors import RepositoryError
from domain.time import require_utc_timestamp


def to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_optional_datetime(value: Any) -> Optional[datetime]:
    return parse_utc_datetime(value) if value else None


def parse_decimal(value: Any, default: str = "0") -> Decimal:
    # str() first so floats from JSON keep their printed precision
    return Decimal(str(value)) if value is not None else Decimal(default)


def parse_categories(value: Any) -> FrozenSet[str]:
    return frozenset(str(c) for c in (value or []))


def execute(query: Any, action: str) -> List[Mapping[str, Any]]:
    """
    Run a postgrest query and return its rows.

    Raises:
        RepositoryError: if the backend reports an error or cannot be reached
    """

    try:
        response = query.execute()
    except APIError as e:
        raise RepositoryError(f"Failed to {action}: {e}") from e
    except httpx.HTTPError as e:
        raise RepositoryError(f"Failed to {action}: {e}") from e

    error = getattr(response, "error", None)
    if error:
        raise RepositoryError(f"Failed to {action}: {error}")

    return getattr(response, "data", None) or []


__all__ = [
    "to_iso_utc",
    "parse_utc_datetime",
    "parse_optional_datetime",
    "parse_decimal",
    "parse_categories",
    "execute",
]
