"""Supabase client singleton.

Provides ``get_supabase()`` which returns a lazily-initialized, process-wide
Supabase client using credentials from ``settings``, and
``candidates_table()`` which starts a PostgREST query on the candidates
table.
"""

from typing import Any

from supabase import Client, create_client

from app.core.config import settings

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def candidates_table(client: Client | None = None) -> Any:
    """Return a fresh request builder for ``settings.CANDIDATES_TABLE``."""
    return (client or get_supabase()).table(settings.CANDIDATES_TABLE)
