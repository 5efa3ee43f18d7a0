"""Construction of the configured document store."""

from __future__ import annotations

import logging

from ..config import Settings, settings as default_settings
from ..errors import PersistenceError
from ..persistence.memory import MemoryStore
from ..persistence.store import DocumentStore
from ..persistence.supabase_store import SupabaseStore
from .supabase import get_supabase_client


def create_store(config: Settings | None = None) -> DocumentStore:
    """Build the store selected by ``store_backend``.

    The Supabase backend raises when credentials are missing; it never falls
    back to the memory store.
    """
    config = config or default_settings
    if config.store_backend == "supabase":
        client = get_supabase_client(config.supabase_url, config.supabase_key)
        if client is None:
            raise PersistenceError(
                "Supabase store selected but not configured. "
                "Set WASTE_SUPABASE_URL and WASTE_SUPABASE_KEY environment variables."
            )
        logging.info("Using Supabase document store")
        return SupabaseStore(client)
    logging.info("Using in-memory document store")
    return MemoryStore()
