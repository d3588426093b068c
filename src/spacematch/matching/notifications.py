"""
Estado local de matches vistos.

Lleva, del lado del cliente, qué matches ya fueron mostrados al usuario
para el festejo de "nuevo match" y el badge de no leídos. El conjunto
solo crece y vive en un archivo local (no se sincroniza entre equipos).
"""

import json
from pathlib import Path
from typing import Iterable, Optional, TypeVar

import structlog

from spacematch.config import get_settings
from spacematch.models import Match

logger = structlog.get_logger()

M = TypeVar("M", bound=Match)


class SeenMatchStore:
    """
    Conjunto persistido de IDs de matches vistos.

    Almacenamiento ausente o corrupto se lee como conjunto vacío;
    nunca lanza excepciones hacia la UI.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or get_settings().seen_matches_path).expanduser()

    def load(self) -> set[str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return set()
        except OSError as e:
            logger.warning("No se pudo leer el estado de matches vistos", path=str(self.path), error=str(e))
            return set()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Estado de matches vistos corrupto, se ignora", path=str(self.path))
            return set()

        if not isinstance(data, list):
            return set()
        return {str(item) for item in data if isinstance(item, (str, int))}

    def save(self, ids: set[str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(sorted(ids)), encoding="utf-8")
        except OSError as e:
            logger.warning("No se pudo guardar el estado de matches vistos", path=str(self.path), error=str(e))

    def partition(self, matches: Iterable[M]) -> tuple[list[M], list[M]]:
        """
        Separa los matches en (vistos, nuevos), conservando el orden.
        """
        seen_ids = self.load()
        seen, new = [], []
        for match in matches:
            (seen if match.id in seen_ids else new).append(match)
        return seen, new

    def new_count(self, matches: Iterable[Match]) -> int:
        return len(self.partition(matches)[1])

    def mark_seen(self, matches: Iterable[Match]) -> set[str]:
        """Agrega los IDs al conjunto persistido (unión, nunca borra)."""
        seen_ids = self.load()
        before = len(seen_ids)
        seen_ids.update(m.id for m in matches if m.id)
        if len(seen_ids) != before:
            self.save(seen_ids)
        return seen_ids


class MatchNotifications:
    """
    Estado de notificaciones de matches de un usuario.

    Combina el cliente HTTP (GET /match) con el conjunto local de vistos.
    """

    def __init__(self, client, store: Optional[SeenMatchStore] = None):
        self.client = client
        self.store = store or SeenMatchStore()
        self.all_matches: list[Match] = []
        self.new_matches: list[Match] = []

    async def refresh(self, user_id: str) -> tuple[list[Match], list[Match]]:
        """Trae los matches del usuario y calcula cuáles son nuevos."""
        self.all_matches = await self.client.get_user_matches(user_id)
        _, self.new_matches = self.store.partition(self.all_matches)
        return self.all_matches, self.new_matches

    def mark_all_seen(self) -> None:
        self.store.mark_seen(self.all_matches)
        self.new_matches = []

    async def counts(self, user_id: str) -> tuple[int, int]:
        """
        (total, nuevos) para el badge. Un error de red devuelve (0, 0).
        """
        try:
            matches = await self.client.get_user_matches(user_id)
        except Exception as e:
            logger.debug("No se pudo actualizar el badge de matches", error=str(e))
            return 0, 0
        return len(matches), self.store.new_count(matches)
