"""
Cliente HTTP de la API de matches.
"""

from typing import Optional

import aiohttp

from spacematch.config import get_settings
from spacematch.models import EnrichedMatch


class SpaceMatchClient:
    """Cliente mínimo para consultar los matches de un usuario."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self._session = session

    async def get_user_matches(self, user_id: str) -> list[EnrichedMatch]:
        """
        GET /match?userId=...

        Raises:
            aiohttp.ClientResponseError: Si la API responde con error
        """
        if self._session is not None:
            return await self._fetch(self._session, user_id)
        async with aiohttp.ClientSession() as session:
            return await self._fetch(session, user_id)

    async def _fetch(self, session: aiohttp.ClientSession, user_id: str) -> list[EnrichedMatch]:
        async with session.get(
            f"{self.base_url}/match", params={"userId": user_id}
        ) as resp:
            resp.raise_for_status()
            data = await resp.json()
        return [EnrichedMatch.model_validate(m) for m in data.get("matches") or []]
