"""Supabase client construction."""

import logging
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client


@lru_cache()
def get_supabase_client(url: Optional[str], key: Optional[str]) -> Client | None:
    """Return a cached client for the given project credentials.

    Returns ``None`` when either credential is missing or the client cannot be
    built. No query is issued, so network failures surface on first use.
    """
    if not url or not key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client for {url}: {e}")
        return None
