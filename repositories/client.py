"""
Supabase client initialization.

This module contains *only* the database connection setup and exposes a single
`supabase` client object for the Supabase-backed repositories.

Environment variables:
- SUPABASE_URL: Your Supabase project URL (required)
- SUPABASE_KEY: Your Supabase API key (required; use a server-side key only on the backend)
- SUPABASE_TIMEOUT_SECONDS: Per-request timeout for table queries (default: 10)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# The dependency is `supabase` (supabase-py). If your editor can't resolve it,
# install it in your environment: `pip install supabase`.
from supabase import Client, ClientOptions, create_client  # type: ignore[import-not-found]

# Load environment variables from the .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Read credentials from the environment to avoid hard-coding secrets in code.
SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
SUPABASE_KEY: str | None = os.getenv("SUPABASE_KEY")
SUPABASE_TIMEOUT_SECONDS: int = int(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10"))

if not SUPABASE_URL:
    raise RuntimeError(
        "Missing environment variable: SUPABASE_URL. "
        "Set SUPABASE_URL to your Supabase project URL."
    )

if not SUPABASE_KEY:
    raise RuntimeError(
        "Missing environment variable: SUPABASE_KEY. "
        "Set SUPABASE_KEY to your Supabase API key."
    )

# Repository calls fail instead of hanging when the backend is unreachable.
supabase: Client = create_client(
    SUPABASE_URL,
    SUPABASE_KEY,
    options=ClientOptions(postgrest_client_timeout=SUPABASE_TIMEOUT_SECONDS),
)

__all__ = ["supabase"]
