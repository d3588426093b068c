"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Raíz del proyecto (donde está el .env)
# config.py -> spacematch/ -> src/ -> raíz
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Stripe
    stripe_secret_key: Optional[str] = Field(None, description="Secret key de Stripe")
    stripe_webhook_secret: Optional[str] = Field(
        None, description="Secreto de firma del webhook (whsec_...)"
    )
    stripe_api_base: str = Field(
        "https://api.stripe.com/v1", description="URL base de la API REST de Stripe"
    )
    stripe_webhook_tolerance_seconds: int = Field(
        300, ge=0, description="Antigüedad máxima aceptada de una firma de webhook"
    )

    # Conexión paga
    connection_fee_cents: int = Field(500, ge=0, description="Precio de desbloquear contacto")
    connection_fee_currency: str = Field("usd", description="Moneda del cobro")
    app_url: str = Field(
        "http://localhost:3000", description="URL pública del frontend para redirects"
    )

    # Matching
    match_max_results: int = Field(10, ge=1, description="Máximo de matches por post")
    match_min_attributes: int = Field(
        4, ge=0, description="Mínimo de atributos coincidentes para mostrar un match"
    )
    match_candidate_limit: int = Field(
        500, ge=1, description="Tamaño de la página de candidatos a evaluar"
    )

    # API HTTP
    api_host: str = Field("0.0.0.0", description="Host de escucha de la API")
    api_port: int = Field(8080, description="Puerto de escucha de la API")

    # Cliente
    api_base_url: str = Field(
        "http://localhost:8080", description="URL de la API para el cliente de matches"
    )
    seen_matches_path: Path = Field(
        Path.home() / ".spacematch" / "seen_matches.json",
        description="Archivo local con los matches ya vistos",
    )
    match_poll_interval_seconds: int = Field(
        60, ge=1, description="Intervalo de polling de matches nuevos"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()
