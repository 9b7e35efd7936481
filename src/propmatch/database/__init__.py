"""
Database module.

Provides the persisted corpus stores and Supabase access.
"""

from propmatch.database.supabase_client import get_supabase_client, SupabaseClient
from propmatch.database.corpus_store import (
    CorpusStore,
    JsonCorpusStore,
    SupabaseCorpusStore,
    get_corpus_store,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "CorpusStore",
    "JsonCorpusStore",
    "SupabaseCorpusStore",
    "get_corpus_store",
]
