"""
Checkout de Stripe para desbloquear el contacto de un match.

Usa la API REST directamente (form-encoded) con aiohttp.
"""

import uuid
from typing import Optional

import aiohttp
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from spacematch.config import get_settings
from spacematch.exceptions import PaymentProviderError
from spacematch.models import Match

logger = structlog.get_logger()

PRODUCT_NAME = "SpaceMatch Connection Fee"
PRODUCT_DESCRIPTION = "Unlock contact information and start a conversation"


class StripeCheckoutService:
    """Crea sesiones de checkout para el cobro de conexión."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        api_base: Optional[str] = None,
    ):
        self.settings = get_settings()
        self.secret_key = secret_key or self.settings.stripe_secret_key
        self.api_base = (api_base or self.settings.stripe_api_base).rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def build_session_params(self, match: Match, user_id: str) -> dict:
        """Parámetros form-encoded de la sesión (un solo ítem, modo payment)."""
        app_url = self.settings.app_url.rstrip("/")
        return {
            "mode": "payment",
            "payment_method_types[0]": "card",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": self.settings.connection_fee_currency,
            "line_items[0][price_data][unit_amount]": str(self.settings.connection_fee_cents),
            "line_items[0][price_data][product_data][name]": PRODUCT_NAME,
            "line_items[0][price_data][product_data][description]": PRODUCT_DESCRIPTION,
            "success_url": f"{app_url}/messages?matchId={match.id}&success=true",
            "cancel_url": f"{app_url}/post/{match.seeker_post_id}?cancelled=true",
            "metadata[matchId]": match.id,
            "metadata[userId]": user_id,
            "metadata[seekerId]": match.seeker_id,
            "metadata[landlordId]": match.landlord_id,
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(aiohttp.ClientError),
        reraise=True,
    )
    async def _post(self, path: str, params: dict, idempotency_key: str) -> dict:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                f"{self.api_base}{path}",
                data=params,
                auth=aiohttp.BasicAuth(self.secret_key, ""),
                headers={"Idempotency-Key": idempotency_key},
            ) as resp:
                data = await resp.json(content_type=None)
                if resp.status != 200:
                    message = (data or {}).get("error", {}).get("message", "Unknown")
                    logger.error("Error de Stripe", status=resp.status, error=message)
                    raise PaymentProviderError(f"Stripe API error: {message}", status=resp.status)
                return data

    async def create_checkout_session(self, match: Match, user_id: str) -> dict:
        """
        Crea la sesión de checkout para un match.

        Returns:
            {"session_id": ..., "url": ...}

        Raises:
            PaymentProviderError: Si Stripe no está configurado o rechaza el pedido
        """
        if not self.is_configured:
            raise PaymentProviderError("Stripe not configured")

        # La misma key en todos los reintentos
        idempotency_key = str(uuid.uuid4())
        data = await self._post(
            "/checkout/sessions",
            self.build_session_params(match, user_id),
            idempotency_key,
        )

        logger.info("Sesión de checkout creada", match_id=match.id, session_id=data.get("id"))
        return {"session_id": data.get("id"), "url": data.get("url")}
