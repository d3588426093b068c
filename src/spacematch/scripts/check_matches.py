"""
Script para consultar los matches nuevos de un usuario.

Usa el estado local de matches vistos, igual que el badge de la UI.

Uso:
    python -m spacematch.scripts.check_matches --user-id <id>
    python -m spacematch.scripts.check_matches --user-id <id> --mark-seen
    python -m spacematch.scripts.check_matches --user-id <id> --watch
"""

import argparse
import asyncio
import sys

import structlog

from spacematch.api import SpaceMatchClient
from spacematch.config import get_settings
from spacematch.logging_config import configure_logging
from spacematch.matching import MatchNotifications

logger = structlog.get_logger()


def _describe(match) -> str:
    return (
        f"[{match.match_score:>3}] {match.seeker_post_title} "
        f"<-> {match.landlord_post_title} ({match.status.value})"
    )


async def check(user_id: str, mark_seen: bool) -> int:
    notifications = MatchNotifications(SpaceMatchClient())
    all_matches, new_matches = await notifications.refresh(user_id)

    print(f"Matches: {len(all_matches)} | Nuevos: {len(new_matches)}")
    for match in new_matches:
        print(f"  * {_describe(match)}")

    if mark_seen:
        notifications.mark_all_seen()
    return len(new_matches)


async def watch(user_id: str, interval: int):
    """Polling del badge de matches nuevos."""
    notifications = MatchNotifications(SpaceMatchClient())
    while True:
        count, new_count = await notifications.counts(user_id)
        logger.info("Badge de matches", user_id=user_id, total=count, new=new_count)
        await asyncio.sleep(interval)


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Matches nuevos de un usuario")
    parser.add_argument("--user-id", required=True)
    parser.add_argument("--mark-seen", action="store_true", help="Marcar todos como vistos")
    parser.add_argument("--watch", action="store_true", help="Consultar periódicamente")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        if args.watch:
            asyncio.run(watch(args.user_id, settings.match_poll_interval_seconds))
        else:
            asyncio.run(check(args.user_id, args.mark_seen))
        sys.exit(0)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        logger.error("Error consultando matches", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
