"""
Buscador de matches entre posts need y space.

Flujo:
1. Obtener los posts activos del tipo opuesto (una sola página)
2. Descartar los del mismo autor
3. Calcular el score de cada candidato
4. Filtrar por score > 0 y mínimo de atributos coincidentes
5. Ordenar por score (estable en empates) y truncar
"""

from datetime import datetime
from typing import Optional

import structlog

from spacematch.config import get_settings
from spacematch.database import PostRepository
from spacematch.matching.scorer import score_match
from spacematch.models import MatchCandidate, Post

logger = structlog.get_logger()


class MatchFinder:
    """
    Motor de matching de un post contra la población opuesta.

    No persiste nada: cuándo invocarlo y qué hacer con los resultados
    lo decide quien orquesta el request.
    """

    def __init__(
        self,
        post_repo: Optional[PostRepository] = None,
        max_results: Optional[int] = None,
        min_attributes: Optional[int] = None,
        candidate_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.post_repo = post_repo or PostRepository()
        self.max_results = max_results or settings.match_max_results
        self.min_attributes = (
            min_attributes if min_attributes is not None else settings.match_min_attributes
        )
        self.candidate_limit = candidate_limit or settings.match_candidate_limit

    async def find_matches(
        self,
        post: Post,
        now: Optional[datetime] = None,
    ) -> list[MatchCandidate]:
        """
        Encuentra los mejores candidatos para un post.

        Args:
            post: Post need o space recién creado
            now: Momento de referencia para la regla de disponibilidad

        Returns:
            Hasta `max_results` candidatos ordenados por score descendente.
            Lista vacía si el fetch de candidatos falla.
        """
        opposite = post.type.opposite
        if opposite is None:
            logger.info("Post sin tipo opuesto, no se matchea", post_id=post.id, type=post.type.value)
            return []

        try:
            candidates = self.post_repo.get_active_by_type(opposite, limit=self.candidate_limit)
        except Exception as e:
            logger.error(
                "Error obteniendo candidatos, se devuelven 0 matches",
                post_id=post.id,
                error=str(e),
            )
            return []

        matches = []
        for candidate in candidates:
            # Nunca matchear con posts propios
            if candidate.author_id == post.author_id or not candidate.id:
                continue

            result = score_match(post, candidate, now=now)
            if result.score <= 0 or len(result.matching_attributes) < self.min_attributes:
                continue

            matches.append(
                MatchCandidate(
                    post_id=candidate.id,
                    title=candidate.title,
                    author_name=candidate.author_name,
                    author_id=candidate.author_id,
                    score=result.score,
                    matching_attributes=result.matching_attributes,
                )
            )

        # sort es estable: los empates conservan el orden del fetch
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.info(
            "Matches encontrados",
            post_id=post.id,
            candidates=len(candidates),
            qualified=len(matches),
        )

        return matches[: self.max_results]
