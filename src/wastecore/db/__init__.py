"""Database clients and utilities."""

from .factory import create_store
from .supabase import get_supabase_client

__all__ = ["create_store", "get_supabase_client"]
