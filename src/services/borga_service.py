import logging
from collections.abc import Callable
from typing import Any, Optional

from catalog.catalog import GameCatalog, UnknownCatalogGame, CatalogRequestFailed
from errors import Unauthorized, GameNotFound, CatalogUnavailable, InvalidOperation
from models import UserName, Token, GroupId, GameId
from models.game import Game
from models.group import Group
from models.user import User
from stores.store import Store

AUTHED_OPERATIONS: set[str] = set()


def authed[F: Callable[..., Any]](operation: F) -> F:
    """Marks an operation taking the acting user as its first argument, making it reachable through execute_authed"""
    AUTHED_OPERATIONS.add(operation.__name__)
    return operation


class BorgaService:
    def __init__(self, store: Store, catalog: GameCatalog, strict_ownership: bool = False):
        self.__store = store
        self.__catalog = catalog
        self.__strict_ownership = strict_ownership
        self.__logger = logging.getLogger(self.__class__.__name__)

    async def connect_token_with_user(self, token: Token, user_name: UserName):
        await self.__store.connect_token_with_user(token, user_name)

    async def get_user_token(self, user_name: UserName) -> Optional[Token]:
        return await self.__store.get_user_token(user_name)

    async def execute_authed(self, token: Token, operation_name: str, *args, **kwargs) -> Any:
        user_name = await self.__store.get_token_user(token)
        if user_name is None:
            raise Unauthorized()
        if operation_name not in AUTHED_OPERATIONS:
            raise InvalidOperation(operation_name)
        self.__logger.debug("Executing %s as %s", operation_name, user_name)
        return await getattr(self, operation_name)(user_name, *args, **kwargs)

    async def __check_access(self, user_name: UserName, group_id: GroupId):
        await self.__store.get_group(group_id)
        # Without strict ownership any authenticated user may change any group
        if self.__strict_ownership and not await self.__store.user_has_group(user_name, group_id):
            self.__logger.info("User %s tried to modify group %s it does not hold", user_name, group_id)
            raise Unauthorized(f"group {group_id}")

    @authed
    async def create_group(self, user_name: UserName, name: str, description: Optional[str] = None) -> GroupId:
        await self.__store.get_user(user_name)
        group_id = await self.__store.create_group(name, description)
        await self.__store.add_group_to_user(user_name, group_id)
        return group_id

    @authed
    async def change_group_name(self, user_name: UserName, group_id: GroupId, new_name: str):
        await self.__check_access(user_name, group_id)
        await self.__store.change_group_name(group_id, new_name)

    @authed
    async def delete_group(self, user_name: UserName, group_id: GroupId):
        await self.__check_access(user_name, group_id)
        await self.__store.delete_group(group_id)

    @authed
    async def add_game_to_group_by_id(self, user_name: UserName, group_id: GroupId, game_id: GameId) -> GameId:
        await self.__check_access(user_name, group_id)
        try:
            game = await self.__catalog.resolve(game_id)
        except UnknownCatalogGame as e:
            raise GameNotFound(game_id) from e
        except CatalogRequestFailed as e:
            raise CatalogUnavailable(str(e)) from e
        # The group may have changed while the catalog was being queried, the store checks again
        return await self.__store.add_group_game(group_id, game)

    @authed
    async def add_game_to_group(self, user_name: UserName, group_id: GroupId, game: Game) -> GameId:
        await self.__check_access(user_name, group_id)
        return await self.__store.add_group_game(group_id, game)

    @authed
    async def delete_game_from_group(self, user_name: UserName, group_id: GroupId, game_id: GameId):
        await self.__check_access(user_name, group_id)
        await self.__store.delete_game_from_group(group_id, game_id)

    @authed
    async def get_user_groups(self, user_name: UserName) -> list[GroupId]:
        return await self.__store.get_user_groups(user_name)

    @authed
    async def add_group_to_user(self, user_name: UserName, group_id: GroupId):
        await self.__store.add_group_to_user(user_name, group_id)

    @authed
    async def delete_group_from_user(self, user_name: UserName, group_id: GroupId):
        await self.__store.delete_group_from_user(user_name, group_id)

    @authed
    async def user_has_group(self, user_name: UserName, group_id: GroupId) -> bool:
        return await self.__store.user_has_group(user_name, group_id)

    async def get_group(self, group_id: GroupId) -> Group:
        return await self.__store.get_group(group_id)

    async def get_group_games(self, group_id: GroupId) -> list[Game]:
        return await self.__store.get_group_games(group_id)

    async def get_group_game_names(self, group_id: GroupId) -> list[str]:
        return await self.__store.get_group_game_names(group_id)

    async def group_has_game(self, group_id: GroupId, game_id: GameId) -> bool:
        return await self.__store.group_has_game(group_id, game_id)

    async def create_user(self, user_name: UserName):
        await self.__store.create_user(user_name)

    async def get_user(self, user_name: UserName) -> User:
        return await self.__store.get_user(user_name)

    async def delete_user(self, user_name: UserName):
        await self.__store.delete_user(user_name)

    async def reset_all(self):
        await self.__store.reset_all()
