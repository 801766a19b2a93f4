import asyncio

import pytest

from conftest import FakeCatalog, UNREACHABLE_GAME_ID
from errors import (ErrorCode, Unauthorized, InvalidOperation, GroupDoesNotExist, GroupAlreadyHasGame,
                    GameNotFound, CatalogUnavailable, UserDoesNotExist, InvalidGroupName, GameDoesNotExistInGroup)
from models.game import Game
from services.borga_service import BorgaService, AUTHED_OPERATIONS
from stores.memory_store import MemoryStore

TEST_USER = "Zé"
TEST_TOKEN = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@pytest.mark.asyncio
async def test_execute_authed_creates_group_for_token_user(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.connect_token_with_user("TOK", TEST_USER)

    group_id = await service.execute_authed("TOK", "create_group", "N", "D")

    group = await service.get_group(group_id)
    assert (group.name, group.description) == ("N", "D")
    assert await service.get_user_groups(TEST_USER) == [group_id]


@pytest.mark.asyncio
async def test_execute_authed_with_unbound_token(service: BorgaService) -> None:
    await service.create_user(TEST_USER)

    with pytest.raises(Unauthorized) as exc_info:
        await service.execute_authed("NOT BOUND", "create_group", "N", "D")
    assert exc_info.value.code == ErrorCode.UNAUTHORIZED


@pytest.mark.asyncio
@pytest.mark.parametrize("operation_name", ["reset_all", "delete_user", "execute_authed", "_BorgaService__check_access",
                                            "no_such_operation"])
async def test_execute_authed_only_runs_user_operations(service: BorgaService, operation_name: str) -> None:
    await service.create_user(TEST_USER)
    await service.connect_token_with_user("TOK", TEST_USER)

    with pytest.raises(InvalidOperation):
        await service.execute_authed("TOK", operation_name)

    assert (await service.get_user(TEST_USER)).name == TEST_USER


def test_authed_operations() -> None:
    assert AUTHED_OPERATIONS >= {"create_group", "change_group_name", "delete_group", "add_game_to_group",
                                 "add_game_to_group_by_id", "delete_game_from_group", "get_user_groups",
                                 "add_group_to_user", "delete_group_from_user", "user_has_group"}
    assert "reset_all" not in AUTHED_OPERATIONS


@pytest.mark.asyncio
async def test_token_binding_does_not_need_user(service: BorgaService) -> None:
    await service.connect_token_with_user("TOK", "Ghost")

    with pytest.raises(UserDoesNotExist):
        await service.execute_authed("TOK", "create_group", "N")


@pytest.mark.asyncio
async def test_every_token_of_a_user_authorizes(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.connect_token_with_user("T1", TEST_USER)
    await service.connect_token_with_user("T2", TEST_USER)

    group_id = await service.execute_authed("T2", "create_group", "N")

    assert await service.execute_authed("T1", "get_user_groups") == [group_id]
    assert await service.get_user_token(TEST_USER) == "T2"


@pytest.mark.asyncio
async def test_token_survives_user_deletion(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.connect_token_with_user("TOK", TEST_USER)
    await service.delete_user(TEST_USER)

    with pytest.raises(UserDoesNotExist):
        await service.execute_authed("TOK", "get_user_groups")

    await service.create_user(TEST_USER)
    assert await service.execute_authed("TOK", "get_user_groups") == []


@pytest.mark.asyncio
async def test_create_group_with_empty_name(service: BorgaService) -> None:
    await service.create_user(TEST_USER)

    with pytest.raises(InvalidGroupName):
        await service.create_group(TEST_USER, "")

    assert await service.get_user_groups(TEST_USER) == []


@pytest.mark.asyncio
async def test_change_group_name(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "Old Group", "New Description")

    await service.change_group_name(TEST_USER, group_id, "New Group Name")

    assert (await service.get_group(group_id)).name == "New Group Name"
    with pytest.raises(InvalidGroupName):
        await service.change_group_name(TEST_USER, group_id, "")
    with pytest.raises(GroupDoesNotExist):
        await service.change_group_name(TEST_USER, 1234, "Something")


@pytest.mark.asyncio
async def test_delete_group_is_pruned_from_user(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group", "New Description")

    await service.delete_group(TEST_USER, group_id)

    with pytest.raises(GroupDoesNotExist):
        await service.get_group(group_id)
    assert await service.get_user_groups(TEST_USER) == []


@pytest.mark.asyncio
async def test_add_game_by_id(service: BorgaService, catalog: FakeCatalog) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group", "New Description")

    assert await service.add_game_to_group_by_id(TEST_USER, group_id, "TAAifFP590") == "TAAifFP590"

    assert catalog.requests == ["TAAifFP590"]
    assert await service.group_has_game(group_id, "TAAifFP590")


@pytest.mark.asyncio
async def test_add_games_by_id_keeps_order(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group", "New Description")

    await service.add_game_to_group_by_id(TEST_USER, group_id, "5H5JS0KLzK")
    await service.add_game_to_group_by_id(TEST_USER, group_id, "8xos44jY7Q")

    assert await service.get_group_game_names(group_id) == ["Wingspan", "Everdell"]
    assert (await service.get_group_games(group_id))[0].details == {"year_published": 2019}


@pytest.mark.asyncio
async def test_add_duplicate_game_by_id(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group", "New Description")
    await service.add_game_to_group_by_id(TEST_USER, group_id, "TAAifFP590")

    with pytest.raises(GroupAlreadyHasGame):
        await service.add_game_to_group_by_id(TEST_USER, group_id, "TAAifFP590")

    assert await service.get_group_game_names(group_id) == ["Root"]


@pytest.mark.asyncio
async def test_add_game_to_missing_group_skips_catalog(service: BorgaService, catalog: FakeCatalog) -> None:
    with pytest.raises(GroupDoesNotExist):
        await service.add_game_to_group_by_id(TEST_USER, 1, "TAAifFP590")

    assert catalog.requests == []


@pytest.mark.asyncio
async def test_unknown_catalog_game(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group")

    with pytest.raises(GameNotFound) as exc_info:
        await service.add_game_to_group_by_id(TEST_USER, group_id, "missing")

    assert exc_info.value.code == ErrorCode.GAME_NOT_FOUND
    assert await service.get_group_games(group_id) == []


@pytest.mark.asyncio
async def test_unreachable_catalog(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group")

    with pytest.raises(CatalogUnavailable):
        await service.add_game_to_group_by_id(TEST_USER, group_id, UNREACHABLE_GAME_ID)

    assert await service.get_group_games(group_id) == []


class SlowCatalog(FakeCatalog):
    def __init__(self, games: list[Game]):
        super().__init__(games)
        self.release = asyncio.Event()

    async def resolve(self, game_id):
        await self.release.wait()
        return await super().resolve(game_id)


@pytest.mark.asyncio
async def test_duplicate_is_detected_after_catalog_lookup() -> None:
    catalog = SlowCatalog([Game("5H5JS0KLzK", "Wingspan")])
    service = BorgaService(MemoryStore(), catalog)
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group")

    pending = asyncio.create_task(service.add_game_to_group_by_id(TEST_USER, group_id, "5H5JS0KLzK"))
    await asyncio.sleep(0)
    await service.add_game_to_group(TEST_USER, group_id, Game("5H5JS0KLzK", "Wingspan"))
    catalog.release.set()

    with pytest.raises(GroupAlreadyHasGame):
        await pending
    assert await service.get_group_game_names(group_id) == ["Wingspan"]


@pytest.mark.asyncio
async def test_group_deleted_during_catalog_lookup() -> None:
    catalog = SlowCatalog([Game("5H5JS0KLzK", "Wingspan")])
    service = BorgaService(MemoryStore(), catalog)
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group")

    pending = asyncio.create_task(service.add_game_to_group_by_id(TEST_USER, group_id, "5H5JS0KLzK"))
    await asyncio.sleep(0)
    await service.delete_group(TEST_USER, group_id)
    catalog.release.set()

    with pytest.raises(GroupDoesNotExist):
        await pending


@pytest.mark.asyncio
async def test_add_and_delete_game_record(service: BorgaService, catalog: FakeCatalog) -> None:
    await service.create_user(TEST_USER)
    group_id = await service.create_group(TEST_USER, "New Group", "New Description")
    game = Game("jhadHUIA", "First")

    await service.add_game_to_group(TEST_USER, group_id, game)
    assert await service.group_has_game(group_id, game.id)
    await service.delete_game_from_group(TEST_USER, group_id, game.id)

    assert not await service.group_has_game(group_id, game.id)
    assert catalog.requests == []
    with pytest.raises(GameDoesNotExistInGroup):
        await service.delete_game_from_group(TEST_USER, group_id, game.id)


@pytest.mark.asyncio
async def test_user_group_operations(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.create_user("Manuel")
    group_id = await service.create_group(TEST_USER, "A", "B")

    await service.add_group_to_user("Manuel", group_id)
    assert group_id in (await service.get_user("Manuel")).groups
    with pytest.raises(GroupDoesNotExist):
        await service.add_group_to_user("Manuel", 9999)

    await service.delete_group_from_user("Manuel", group_id)
    assert not await service.user_has_group("Manuel", group_id)
    assert await service.user_has_group(TEST_USER, group_id)


@pytest.mark.asyncio
async def test_permissive_ownership_by_default(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.create_user("Manuel")
    group_id = await service.create_group(TEST_USER, "Zé's games")

    await service.change_group_name("Manuel", group_id, "Manuel's now")

    assert (await service.get_group(group_id)).name == "Manuel's now"


@pytest.mark.asyncio
async def test_strict_ownership(store: MemoryStore, catalog: FakeCatalog) -> None:
    service = BorgaService(store, catalog, strict_ownership=True)
    await service.create_user(TEST_USER)
    await service.create_user("Manuel")
    group_id = await service.create_group(TEST_USER, "Zé's games")

    with pytest.raises(Unauthorized):
        await service.change_group_name("Manuel", group_id, "Manuel's now")
    with pytest.raises(Unauthorized):
        await service.add_game_to_group_by_id("Manuel", group_id, "5H5JS0KLzK")
    with pytest.raises(Unauthorized):
        await service.delete_group("Manuel", group_id)
    with pytest.raises(GroupDoesNotExist):
        await service.delete_group("Manuel", 9999)

    assert catalog.requests == []
    await service.add_game_to_group_by_id(TEST_USER, group_id, "5H5JS0KLzK")
    await service.delete_group(TEST_USER, group_id)


@pytest.mark.asyncio
async def test_reset_all(service: BorgaService) -> None:
    await service.create_user(TEST_USER)
    await service.connect_token_with_user(TEST_TOKEN, TEST_USER)
    group_id = await service.execute_authed(TEST_TOKEN, "create_group", "New Group")

    await service.reset_all()

    with pytest.raises(UserDoesNotExist):
        await service.get_user(TEST_USER)
    with pytest.raises(GroupDoesNotExist):
        await service.get_group_game_names(group_id)
    with pytest.raises(Unauthorized):
        await service.execute_authed(TEST_TOKEN, "get_user_groups")
    assert await service.get_user_token(TEST_USER) is None
