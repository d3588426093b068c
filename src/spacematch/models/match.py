"""
Modelos de Match.

Los nombres de campo en camelCase son el contrato externo del
documento `matches` y de la API; no cambiarlos.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from spacematch.models.post import ensure_utc


class MatchStatus(str, Enum):
    """Estados del match. El orden de declaración es el orden de avance."""

    PENDING = "pending"
    PAID = "paid"
    CONNECTED = "connected"

    @property
    def rank(self) -> int:
        return list(MatchStatus).index(self)

    @property
    def is_paid(self) -> bool:
        return self in (MatchStatus.PAID, MatchStatus.CONNECTED)


class Match(BaseModel):
    """Match persistido entre un post need y un post space."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    id: Optional[str] = None
    seeker_post_id: str
    landlord_post_id: str
    seeker_id: str
    landlord_id: str
    match_score: int = Field(0, ge=0)
    status: MatchStatus = MatchStatus.PENDING
    stripe_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, value):
        return ensure_utc(value)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.seeker_id, self.landlord_id)

    def to_api_dict(self) -> dict:
        """Serializa con los nombres de campo externos."""
        return self.model_dump(by_alias=True, mode="json")


class EnrichedMatch(Match):
    """Match con títulos y autores de ambos posts, para la UI."""

    seeker_post_title: str = "Unknown Post"
    seeker_post_author_name: str = "Unknown"
    landlord_post_title: str = "Unknown Post"
    landlord_post_author_name: str = "Unknown"


class MatchCandidate(BaseModel):
    """Resumen de un candidato devuelto por el buscador de matches."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )

    post_id: str
    title: str = ""
    author_name: str = ""
    score: int = Field(..., ge=0)
    matching_attributes: list[str] = Field(default_factory=list)

    # Solo uso interno: para persistir el match sin releer el post
    author_id: str = Field("", exclude=True)

    def to_api_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
