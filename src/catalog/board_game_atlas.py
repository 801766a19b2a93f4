import logging
from typing import override, Optional

import httpx

from catalog.catalog import GameCatalog, UnknownCatalogGame, CatalogRequestFailed
from models import GameId
from models.game import Game

DEFAULT_BASE_URL = "https://api.boardgameatlas.com/api"
DEFAULT_TIMEOUT_SECONDS = 10.0


class BoardGameAtlasCatalog(GameCatalog):
    """
    Resolves games through the Board Game Atlas search endpoint, which answers
    ``GET /search?ids=<id>&client_id=<client id>`` with ``{"games": [...], "count": n}``.
    """

    def __init__(self, client_id: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS, client: Optional[httpx.AsyncClient] = None):
        self.__logger = logging.getLogger(self.__class__.__name__)
        self.__client_id = client_id
        self.__client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @override
    async def resolve(self, game_id: GameId) -> Game:
        self.__logger.debug("Resolving game %s", game_id)
        try:
            response = await self.__client.get("/search", params={"ids": game_id, "client_id": self.__client_id})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.__logger.warning("Board Game Atlas lookup for %s failed: %s", game_id, e)
            raise CatalogRequestFailed(str(e)) from e

        match = next((entry for entry in payload.get("games", []) if entry.get("id") == game_id), None)
        if match is None:
            raise UnknownCatalogGame(game_id)
        return Game(id=match["id"],
                    name=match.get("name", ""),
                    details={key: value for key, value in match.items() if key not in ("id", "name")})

    @override
    async def aclose(self):
        await self.__client.aclose()
