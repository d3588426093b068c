"""
Excepciones propias de SpaceMatch.
"""

from typing import Optional


class SpaceMatchError(Exception):
    """Base de todas las excepciones del proyecto."""


class MatchNotFoundError(SpaceMatchError):
    """El match referenciado no existe en el store."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Match not found: {match_id}")


class InvalidStatusTransitionError(SpaceMatchError):
    """Transición de estado que haría retroceder al match."""

    def __init__(self, match_id: str, current: str, requested: str):
        self.match_id = match_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move match {match_id} from '{current}' to '{requested}'"
        )


class MatchPersistenceError(SpaceMatchError):
    """El store no devolvió el registro creado."""


class PaymentProviderError(SpaceMatchError):
    """Error al crear la sesión de checkout en el proveedor de pagos."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class WebhookSignatureError(SpaceMatchError):
    """Firma de webhook ausente, inválida o vencida."""
