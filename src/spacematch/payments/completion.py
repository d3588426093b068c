"""
Procesamiento de pagos completados.

Al confirmarse el checkout: el match pasa a connected con la referencia
del pago, se registran las conexiones y se abre el chat entre ambos.
"""

from typing import Optional

import structlog

from spacematch.config import get_settings
from spacematch.database import (
    ChatRepository,
    ConnectionRepository,
    MatchRepository,
    UserRepository,
)
from spacematch.models import Match, MatchStatus

logger = structlog.get_logger()

CHECKOUT_COMPLETED = "checkout.session.completed"


class PaymentCompletionService:
    """
    Aplica un pago completado.

    Los errores se propagan: un pago confirmado que no se puede
    registrar no debe perderse en silencio.
    """

    def __init__(
        self,
        match_repo: Optional[MatchRepository] = None,
        connection_repo: Optional[ConnectionRepository] = None,
        chat_repo: Optional[ChatRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.settings = get_settings()
        self.match_repo = match_repo or MatchRepository()
        self.connection_repo = connection_repo or ConnectionRepository()
        self.chat_repo = chat_repo or ChatRepository()
        self.user_repo = user_repo or UserRepository()

    def complete(
        self,
        match_id: str,
        seeker_id: str,
        landlord_id: str,
        payment_ref: Optional[str],
        amount: Optional[int] = None,
    ) -> Match:
        match = self.match_repo.update_match_status(
            match_id, MatchStatus.CONNECTED, payment_ref
        )

        self.connection_repo.create_for_match(
            match_id=match_id,
            seeker_id=seeker_id,
            landlord_id=landlord_id,
            amount=amount if amount is not None else self.settings.connection_fee_cents,
        )

        seeker = self.user_repo.get_by_id(seeker_id)
        landlord = self.user_repo.get_by_id(landlord_id)
        if seeker and landlord:
            self.chat_repo.get_or_create(seeker, landlord, match_id=match_id)
        else:
            logger.warning(
                "Perfil faltante, no se crea el chat",
                match_id=match_id,
                seeker_found=bool(seeker),
                landlord_found=bool(landlord),
            )

        logger.info("Pago completado", match_id=match_id, payment_ref=payment_ref)
        return match

    def handle_event(self, event: dict) -> Optional[Match]:
        """
        Procesa un evento de webhook.

        Returns:
            El match actualizado, o None si el evento no aplica
        """
        event_type = event.get("type")
        if event_type != CHECKOUT_COMPLETED:
            logger.debug("Evento de webhook ignorado", type=event_type)
            return None

        session = (event.get("data") or {}).get("object") or {}
        metadata = session.get("metadata") or {}
        match_id = metadata.get("matchId")
        seeker_id = metadata.get("seekerId")
        landlord_id = metadata.get("landlordId")

        if not match_id or not seeker_id or not landlord_id:
            logger.error("Checkout sin metadata de match", session_id=session.get("id"))
            return None

        return self.complete(
            match_id=match_id,
            seeker_id=seeker_id,
            landlord_id=landlord_id,
            payment_ref=session.get("payment_intent"),
            amount=session.get("amount_total"),
        )
