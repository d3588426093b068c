"""
Registro y enriquecimiento de matches.

Une el buscador con el gateway de persistencia para el endpoint
POST /match, y agrega títulos/autores para GET /match.
"""

from typing import Optional

import structlog

from spacematch.database import MatchRepository, PostRepository
from spacematch.models import EnrichedMatch, Match, MatchCandidate, Post, PostType

logger = structlog.get_logger()


class MatchRecorder:
    """Persiste como pending los candidatos de una pasada de matching."""

    def __init__(self, match_repo: Optional[MatchRepository] = None):
        self.match_repo = match_repo or MatchRepository()

    def record(self, post: Post, candidates: list[MatchCandidate]) -> list[str]:
        """
        Crea un match por candidato.

        Los pares ya registrados se saltean. Un error de escritura se
        loguea y no impide registrar el resto.

        Returns:
            IDs de los matches creados
        """
        is_seeker = post.type is PostType.NEED
        created = []

        for candidate in candidates:
            if is_seeker:
                seeker_post_id, landlord_post_id = post.id, candidate.post_id
                seeker_id, landlord_id = post.author_id, candidate.author_id
            else:
                seeker_post_id, landlord_post_id = candidate.post_id, post.id
                seeker_id, landlord_id = candidate.author_id, post.author_id

            try:
                existing = self.match_repo.find_match_for_pair(seeker_post_id, landlord_post_id)
                if existing:
                    logger.debug(
                        "Par ya registrado",
                        match_id=existing.id,
                        seeker_post_id=seeker_post_id,
                        landlord_post_id=landlord_post_id,
                    )
                    continue

                created.append(
                    self.match_repo.create_match(
                        seeker_post_id=seeker_post_id,
                        landlord_post_id=landlord_post_id,
                        seeker_id=seeker_id,
                        landlord_id=landlord_id,
                        match_score=candidate.score,
                    )
                )
            except Exception as e:
                logger.error(
                    "Error persistiendo match",
                    seeker_post_id=seeker_post_id,
                    landlord_post_id=landlord_post_id,
                    error=str(e),
                )

        return created


class MatchEnricher:
    """Agrega título y autor de ambos posts a cada match."""

    def __init__(self, post_repo: Optional[PostRepository] = None):
        self.post_repo = post_repo or PostRepository()

    def enrich(self, matches: list[Match]) -> list[EnrichedMatch]:
        cache: dict[str, Optional[Post]] = {}

        def lookup(post_id: str) -> Optional[Post]:
            if post_id not in cache:
                try:
                    cache[post_id] = self.post_repo.get_by_id(post_id)
                except Exception as e:
                    logger.warning("No se pudo leer el post", post_id=post_id, error=str(e))
                    cache[post_id] = None
            return cache[post_id]

        enriched = []
        for match in matches:
            extra = {}
            seeker_post = lookup(match.seeker_post_id)
            if seeker_post:
                extra["seeker_post_title"] = seeker_post.title or "Unknown Post"
                extra["seeker_post_author_name"] = seeker_post.author_name or "Unknown"
            landlord_post = lookup(match.landlord_post_id)
            if landlord_post:
                extra["landlord_post_title"] = landlord_post.title or "Unknown Post"
                extra["landlord_post_author_name"] = landlord_post.author_name or "Unknown"

            enriched.append(EnrichedMatch(**match.model_dump(), **extra))
        return enriched
