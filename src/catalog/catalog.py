from abc import ABC, abstractmethod

from models import GameId
from models.game import Game


class CatalogError(Exception):
    pass


class UnknownCatalogGame(CatalogError):
    def __init__(self, game_id: GameId):
        super().__init__(f"No game with id {game_id} in the catalog")
        self.game_id = game_id


class CatalogRequestFailed(CatalogError):
    pass


class GameCatalog(ABC):
    @abstractmethod
    async def resolve(self, game_id: GameId) -> Game:
        """
        Look up a game by its catalog id.

        Raises UnknownCatalogGame if the catalog has no such game and CatalogRequestFailed if the
        catalog could not be queried.
        """
        pass

    async def aclose(self):
        """Release any connections held by the catalog"""
        pass
