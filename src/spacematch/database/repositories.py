"""
Repositorios para operaciones CRUD en Supabase.

Cada repositorio maneja una tabla/entidad específica. Los documentos
usan los nombres de campo en camelCase del contrato externo.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from pydantic import ValidationError

from spacematch.database.supabase_client import get_supabase_client, SupabaseClient
from spacematch.exceptions import (
    InvalidStatusTransitionError,
    MatchNotFoundError,
    MatchPersistenceError,
)
from spacematch.models import Match, MatchStatus, Post, PostStatus, PostType

logger = structlog.get_logger()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class PostRepository(BaseRepository):
    """Repositorio de posts (need, space y community)."""

    TABLE = "posts"

    def _to_post(self, row: dict) -> Optional[Post]:
        try:
            return Post.model_validate(row)
        except ValidationError as e:
            logger.warning(
                "Post inválido en el store, se ignora",
                post_id=row.get("id"),
                error=str(e),
            )
            return None

    def get_by_id(self, post_id: str) -> Optional[Post]:
        """Obtiene un post por su ID."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", post_id)
            .limit(1)
            .execute()
        )
        return self._to_post(response.data[0]) if response.data else None

    def get_active_by_type(self, post_type: PostType, limit: int = 500) -> list[Post]:
        """
        Obtiene los posts activos de un tipo.

        Una sola página: no se espera más que unos cientos de posts vivos.
        """
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("type", PostType(post_type).value)
            .eq("status", PostStatus.ACTIVE.value)
            .limit(limit)
            .execute()
        )
        posts = [self._to_post(row) for row in response.data]
        return [p for p in posts if p is not None]


class MatchRepository(BaseRepository):
    """
    Gateway de persistencia de matches.

    `create_match` no deduplica: quien orquesta el matching decide
    si un par ya fue registrado (ver `find_match_for_pair`).
    """

    TABLE = "matches"

    def create_match(
        self,
        seeker_post_id: str,
        landlord_post_id: str,
        seeker_id: str,
        landlord_id: str,
        match_score: int,
    ) -> str:
        """
        Crea un match nuevo en estado pending.

        Returns:
            ID del match generado por el store
        """
        now = _now_iso()
        match = Match(
            seeker_post_id=seeker_post_id,
            landlord_post_id=landlord_post_id,
            seeker_id=seeker_id,
            landlord_id=landlord_id,
            match_score=match_score,
            status=MatchStatus.PENDING,
        )
        data = match.model_dump(
            by_alias=True,
            mode="json",
            exclude={"id", "stripe_payment_id", "created_at", "updated_at"},
        )
        data["createdAt"] = now
        data["updatedAt"] = now

        response = self.client.table(self.TABLE).insert(data).execute()
        if not response.data or not response.data[0].get("id"):
            raise MatchPersistenceError(
                f"Store did not return the created match for "
                f"{seeker_post_id}/{landlord_post_id}"
            )

        match_id = str(response.data[0]["id"])
        logger.info(
            "Match creado",
            match_id=match_id,
            seeker_post_id=seeker_post_id,
            landlord_post_id=landlord_post_id,
            score=match_score,
        )
        return match_id

    def get_match(self, match_id: str) -> Optional[Match]:
        """Obtiene un match por su ID."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", match_id)
            .limit(1)
            .execute()
        )
        return Match.model_validate(response.data[0]) if response.data else None

    def find_match_for_pair(
        self, seeker_post_id: str, landlord_post_id: str
    ) -> Optional[Match]:
        """Busca un match ya registrado para el par de posts."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("seekerPostId", seeker_post_id)
            .eq("landlordPostId", landlord_post_id)
            .limit(1)
            .execute()
        )
        return Match.model_validate(response.data[0]) if response.data else None

    def update_match_status(
        self,
        match_id: str,
        status: MatchStatus,
        payment_ref: Optional[str] = None,
    ) -> Match:
        """
        Avanza el estado de un match (read-modify-write).

        Solo se escriben status, updatedAt y, si viene, stripePaymentId;
        el resto de los campos queda intacto. Repetir el estado actual
        no escribe nada.

        Raises:
            MatchNotFoundError: Si el match no existe
            InvalidStatusTransitionError: Si el estado retrocedería
        """
        requested = MatchStatus(status)
        match = self.get_match(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)

        if requested.rank < match.status.rank:
            raise InvalidStatusTransitionError(
                match_id, match.status.value, requested.value
            )

        if requested == match.status:
            if payment_ref and payment_ref != match.stripe_payment_id:
                logger.warning(
                    "Referencia de pago distinta para un match ya en ese estado",
                    match_id=match_id,
                    status=requested.value,
                    stored=match.stripe_payment_id,
                    received=payment_ref,
                )
            return match

        data = {"status": requested.value, "updatedAt": _now_iso()}
        if payment_ref:
            data["stripePaymentId"] = payment_ref

        response = (
            self.client.table(self.TABLE)
            .update(data)
            .eq("id", match_id)
            .execute()
        )
        if not response.data:
            raise MatchNotFoundError(match_id)

        logger.info(
            "Estado de match actualizado",
            match_id=match_id,
            previous=match.status.value,
            status=requested.value,
        )
        return Match.model_validate(response.data[0])

    def get_user_matches(self, user_id: str) -> list[Match]:
        """Matches donde el usuario es seeker o landlord, sin duplicados."""
        as_seeker = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("seekerId", user_id)
            .execute()
        )
        as_landlord = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("landlordId", user_id)
            .execute()
        )

        matches: list[Match] = []
        seen_ids: set[str] = set()
        for row in [*as_seeker.data, *as_landlord.data]:
            match = Match.model_validate(row)
            if match.id in seen_ids:
                continue
            seen_ids.add(match.id)
            matches.append(match)
        return matches


class UserRepository(BaseRepository):
    """Repositorio de perfiles de usuario (solo lectura)."""

    TABLE = "users"

    def get_by_id(self, user_id: str) -> Optional[dict]:
        """Obtiene un usuario por su ID."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None


class ConnectionRepository(BaseRepository):
    """Conexiones pagas: un registro por cada lado del match."""

    TABLE = "connections"

    def create_for_match(
        self,
        match_id: str,
        seeker_id: str,
        landlord_id: str,
        amount: int,
    ) -> list[dict]:
        """
        Registra la conexión para ambos usuarios.

        Los IDs son `<matchId>_<userId>`, así que reprocesar el mismo
        pago pisa los mismos registros.
        """
        now = _now_iso()
        rows = [
            {
                "id": f"{match_id}_{user_id}",
                "matchId": match_id,
                "userId": user_id,
                "connectedUserId": other_id,
                "amount": amount,
                "createdAt": now,
            }
            for user_id, other_id in (
                (seeker_id, landlord_id),
                (landlord_id, seeker_id),
            )
        ]
        response = (
            self.client.table(self.TABLE)
            .upsert(rows, on_conflict="id")
            .execute()
        )
        logger.info("Conexiones registradas", match_id=match_id)
        return response.data


class ChatRepository(BaseRepository):
    """Canales de chat entre dos usuarios."""

    TABLE = "chats"

    def find_by_participants(self, participants: list[str]) -> Optional[dict]:
        """Busca un chat con exactamente esos participantes."""
        expected = sorted(participants)
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .contains("participants", expected)
            .execute()
        )
        for row in response.data:
            if sorted(row.get("participants") or []) == expected:
                return row
        return None

    def get_or_create(
        self,
        first_user: dict,
        second_user: dict,
        match_id: Optional[str] = None,
    ) -> str:
        """
        Devuelve el chat entre dos usuarios, creándolo si no existe.

        Args:
            first_user: Perfil (id, displayName, photoURL)
            second_user: Perfil del otro participante
            match_id: Match que originó el chat

        Returns:
            ID del chat
        """
        participants = sorted([first_user["id"], second_user["id"]])

        existing = self.find_by_participants(participants)
        if existing:
            return str(existing["id"])

        now = _now_iso()
        users = (first_user, second_user)
        data = {
            "participants": participants,
            "participantNames": {u["id"]: u.get("displayName") or "" for u in users},
            "participantPhotos": {u["id"]: u.get("photoURL") or "" for u in users},
            "unreadCount": {u["id"]: 0 for u in users},
            "matchId": match_id,
            "createdAt": now,
            "updatedAt": now,
        }
        response = self.client.table(self.TABLE).insert(data).execute()
        if not response.data:
            raise MatchPersistenceError(f"Store did not return the chat for match {match_id}")

        chat_id = str(response.data[0]["id"])
        logger.info("Chat creado", chat_id=chat_id, match_id=match_id)
        return chat_id
