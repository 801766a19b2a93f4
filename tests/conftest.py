from typing import override

import pytest

from catalog.catalog import GameCatalog, UnknownCatalogGame, CatalogRequestFailed
from models import GameId
from models.game import Game
from services.borga_service import BorgaService
from stores.memory_store import MemoryStore

UNREACHABLE_GAME_ID = "unreachable"


class FakeCatalog(GameCatalog):
    """In-memory catalog recording every lookup. Resolving UNREACHABLE_GAME_ID simulates a network failure."""

    def __init__(self, games: list[Game]):
        self.games = {game.id: game for game in games}
        self.requests: list[GameId] = []

    @override
    async def resolve(self, game_id: GameId) -> Game:
        self.requests.append(game_id)
        if game_id == UNREACHABLE_GAME_ID:
            raise CatalogRequestFailed("connection refused")
        try:
            return self.games[game_id]
        except KeyError:
            raise UnknownCatalogGame(game_id) from None


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog([
        Game("5H5JS0KLzK", "Wingspan", {"year_published": 2019}),
        Game("8xos44jY7Q", "Everdell"),
        Game("TAAifFP590", "Root"),
    ])


@pytest.fixture()
def service(store: MemoryStore, catalog: FakeCatalog) -> BorgaService:
    return BorgaService(store, catalog)
