"""
Script para correr el matching de un post desde la línea de comandos.

Uso:
    python -m spacematch.scripts.run_matching --post-id <id>
    python -m spacematch.scripts.run_matching --post-id <id> --persist
"""

import argparse
import asyncio
import json
import sys

import structlog

from spacematch.config import get_settings
from spacematch.database import PostRepository
from spacematch.logging_config import configure_logging
from spacematch.matching import MatchFinder, MatchRecorder

logger = structlog.get_logger()


async def run_matching(post_id: str, persist: bool = False) -> list[dict]:
    """Busca (y opcionalmente registra) los matches de un post."""
    post_repo = PostRepository()
    post = post_repo.get_by_id(post_id)
    if post is None:
        raise ValueError(f"No existe el post {post_id}")

    candidates = await MatchFinder(post_repo=post_repo).find_matches(post)

    if persist:
        created = MatchRecorder().record(post, candidates)
        logger.info("Matches registrados", post_id=post_id, created=len(created))

    return [c.to_api_dict() for c in candidates]


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Matching de un post de SpaceMatch")
    parser.add_argument("--post-id", required=True, help="ID del post need o space")
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Registrar los matches como pending (igual que POST /match)",
    )
    args = parser.parse_args()

    configure_logging(get_settings().log_level)
    logger.info("Iniciando matching...", post_id=args.post_id)

    try:
        results = asyncio.run(run_matching(args.post_id, persist=args.persist))
        print(json.dumps(results, indent=2, ensure_ascii=False))
        sys.exit(0)
    except KeyboardInterrupt:
        logger.info("Matching interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
