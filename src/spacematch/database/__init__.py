"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from spacematch.database.supabase_client import get_supabase_client, SupabaseClient
from spacematch.database.repositories import (
    PostRepository,
    MatchRepository,
    UserRepository,
    ConnectionRepository,
    ChatRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "PostRepository",
    "MatchRepository",
    "UserRepository",
    "ConnectionRepository",
    "ChatRepository",
]
