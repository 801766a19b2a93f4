import itertools
import logging
from typing import override, Optional

from bidict import bidict

from errors import (InvalidGroupName, GroupDoesNotExist, GroupAlreadyHasGame, GameDoesNotExistInGroup,
                    UserDoesNotExist, UserAlreadyExists)
from models import UserName, Token, GroupId, GameId
from models.game import Game
from models.group import Group
from models.user import User
from stores.store import Store


def _is_valid_name(name: Optional[str]) -> bool:
    return isinstance(name, str) and bool(name.strip())


class MemoryStore(Store):
    def __init__(self):
        self.__logger = logging.getLogger(self.__class__.__name__)
        self.__groups: dict[GroupId, Group] = dict()
        self.__users: dict[UserName, User] = dict()
        self.__tokens: dict[Token, UserName] = dict()
        self.__latest_tokens: bidict[UserName, Token] = bidict()
        self.__group_ids = itertools.count(1)

    def __get_group(self, group_id: GroupId) -> Group:
        try:
            return self.__groups[group_id]
        except (KeyError, TypeError):
            raise GroupDoesNotExist(str(group_id)) from None

    def __get_user(self, user_name: UserName) -> User:
        try:
            return self.__users[user_name]
        except (KeyError, TypeError):
            raise UserDoesNotExist(str(user_name)) from None

    def __prune_user_groups(self, user: User) -> list[GroupId]:
        live_groups = [group_id for group_id in user.groups if group_id in self.__groups]
        if len(live_groups) != len(user.groups):
            self.__logger.info("Pruning deleted groups %s from user %s",
                               [group_id for group_id in user.groups if group_id not in self.__groups], user.name)
            user.groups = live_groups
        return list(live_groups)

    @override
    async def create_group(self, name: str, description: Optional[str] = None) -> GroupId:
        if not _is_valid_name(name):
            raise InvalidGroupName()
        group_id = next(self.__group_ids)
        self.__groups[group_id] = Group(id=group_id, name=name, description=description or "")
        self.__logger.info("Created group %s (%s)", group_id, name)
        return group_id

    @override
    async def get_group(self, group_id: GroupId) -> Group:
        return self.__get_group(group_id).snapshot()

    @override
    async def change_group_name(self, group_id: GroupId, new_name: str):
        group = self.__get_group(group_id)
        if not _is_valid_name(new_name):
            raise InvalidGroupName()
        self.__logger.info("Renaming group %s from %s to %s", group_id, group.name, new_name)
        group.name = new_name

    @override
    async def delete_group(self, group_id: GroupId):
        self.__get_group(group_id)
        del self.__groups[group_id]
        self.__logger.info("Deleted group %s", group_id)

    @override
    async def add_group_game(self, group_id: GroupId, game: Game) -> GameId:
        group = self.__get_group(group_id)
        if game.id in group.games:
            raise GroupAlreadyHasGame(game.id)
        group.games[game.id] = game
        self.__logger.info("Added game %s (%s) to group %s", game.id, game.name, group_id)
        return game.id

    @override
    async def delete_game_from_group(self, group_id: GroupId, game_id: GameId):
        group = self.__get_group(group_id)
        if game_id not in group.games:
            raise GameDoesNotExistInGroup(game_id)
        del group.games[game_id]
        self.__logger.info("Removed game %s from group %s", game_id, group_id)

    @override
    async def group_has_game(self, group_id: GroupId, game_id: GameId) -> bool:
        group = self.__groups.get(group_id)
        return group is not None and game_id in group.games

    @override
    async def get_group_games(self, group_id: GroupId) -> list[Game]:
        return list(self.__get_group(group_id).games.values())

    @override
    async def get_group_game_names(self, group_id: GroupId) -> list[str]:
        return [game.name for game in self.__get_group(group_id).games.values()]

    @override
    async def create_user(self, user_name: UserName):
        if user_name in self.__users:
            raise UserAlreadyExists(user_name)
        self.__users[user_name] = User(name=user_name)
        self.__logger.info("Created user %s", user_name)

    @override
    async def get_user(self, user_name: UserName) -> User:
        user = self.__get_user(user_name)
        return User(name=user.name, groups=self.__prune_user_groups(user))

    @override
    async def delete_user(self, user_name: UserName):
        self.__get_user(user_name)
        del self.__users[user_name]
        self.__logger.info("Deleted user %s", user_name)

    @override
    async def add_group_to_user(self, user_name: UserName, group_id: GroupId):
        user = self.__get_user(user_name)
        self.__get_group(group_id)
        if group_id not in user.groups:
            user.groups.append(group_id)
            self.__logger.info("Added group %s to user %s", group_id, user_name)

    @override
    async def delete_group_from_user(self, user_name: UserName, group_id: GroupId):
        user = self.__get_user(user_name)
        if group_id in user.groups:
            user.groups.remove(group_id)
            self.__logger.info("Removed group %s from user %s", group_id, user_name)

    @override
    async def user_has_group(self, user_name: UserName, group_id: GroupId) -> bool:
        user = self.__get_user(user_name)
        return group_id in user.groups and group_id in self.__groups

    @override
    async def get_user_groups(self, user_name: UserName) -> list[GroupId]:
        return self.__prune_user_groups(self.__get_user(user_name))

    @override
    async def connect_token_with_user(self, token: Token, user_name: UserName):
        self.__logger.debug("Binding a token to user %s", user_name)
        self.__tokens[token] = user_name
        # a token rebound to another user stops being the latest token of its previous user
        self.__latest_tokens.forceput(user_name, token)

    @override
    async def get_token_user(self, token: Token) -> Optional[UserName]:
        return self.__tokens.get(token)

    @override
    async def get_user_token(self, user_name: UserName) -> Optional[Token]:
        return self.__latest_tokens.get(user_name)

    @override
    async def reset_all(self):
        self.__groups.clear()
        self.__users.clear()
        self.__tokens.clear()
        self.__latest_tokens.clear()
        self.__group_ids = itertools.count(1)
        self.__logger.info("Store has been reset")
