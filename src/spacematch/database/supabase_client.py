"""
Cliente de Supabase.

Singleton para conexión al store de documentos.
"""

from functools import lru_cache

import structlog
from supabase import create_client, Client

from spacematch.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Wrapper del cliente de Supabase."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        """Acceso directo al cliente de Supabase."""
        return self._client

    def table(self, name: str):
        """Acceso a una tabla específica."""
        return self._client.table(name)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Obtiene el cliente de Supabase (singleton cacheado).

    Raises:
        ValueError: Si las credenciales no están configuradas
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL y SUPABASE_KEY son requeridos. "
            "Configura las variables de entorno."
        )

    # Service key si está disponible: el backend escribe matches y chats
    key = settings.supabase_service_key or settings.supabase_key

    client = create_client(settings.supabase_url, key)
    logger.info("Cliente de Supabase inicializado", url=settings.supabase_url)

    return SupabaseClient(client)
