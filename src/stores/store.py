from abc import ABC, abstractmethod
from typing import Optional

from models import UserName, Token, GroupId, GameId
from models.game import Game
from models.group import Group
from models.user import User


class TokenMixin(ABC):
    @abstractmethod
    async def connect_token_with_user(self, token: Token, user_name: UserName):
        """Bind token to user_name, replacing any previous binding of the token.
        Other tokens of the same user stay bound. The user does not have to exist."""
        pass

    @abstractmethod
    async def get_token_user(self, token: Token) -> Optional[UserName]:
        """Returns the user bound to token. Returns None if the token is not bound."""
        pass

    @abstractmethod
    async def get_user_token(self, user_name: UserName) -> Optional[Token]:
        """Returns the token most recently bound to user_name. Returns None if there is none."""
        pass


class Store(TokenMixin, ABC):
    @abstractmethod
    async def create_group(self, name: str, description: Optional[str] = None) -> GroupId:
        pass

    @abstractmethod
    async def get_group(self, group_id: GroupId) -> Group:
        pass

    @abstractmethod
    async def change_group_name(self, group_id: GroupId, new_name: str):
        pass

    @abstractmethod
    async def delete_group(self, group_id: GroupId):
        """Removes the group. Users referencing it are cleaned up lazily on their next read."""
        pass

    @abstractmethod
    async def add_group_game(self, group_id: GroupId, game: Game) -> GameId:
        pass

    @abstractmethod
    async def delete_game_from_group(self, group_id: GroupId, game_id: GameId):
        pass

    @abstractmethod
    async def group_has_game(self, group_id: GroupId, game_id: GameId) -> bool:
        """Returns False for a group that does not exist"""
        pass

    @abstractmethod
    async def get_group_games(self, group_id: GroupId) -> list[Game]:
        pass

    @abstractmethod
    async def get_group_game_names(self, group_id: GroupId) -> list[str]:
        pass

    @abstractmethod
    async def create_user(self, user_name: UserName):
        pass

    @abstractmethod
    async def get_user(self, user_name: UserName) -> User:
        pass

    @abstractmethod
    async def delete_user(self, user_name: UserName):
        pass

    @abstractmethod
    async def add_group_to_user(self, user_name: UserName, group_id: GroupId):
        pass

    @abstractmethod
    async def delete_group_from_user(self, user_name: UserName, group_id: GroupId):
        pass

    @abstractmethod
    async def user_has_group(self, user_name: UserName, group_id: GroupId) -> bool:
        pass

    @abstractmethod
    async def get_user_groups(self, user_name: UserName) -> list[GroupId]:
        """
        Get ids of the live groups referenced by the user. Ids of deleted groups are dropped from the
        user as a side effect.
        """
        pass

    @abstractmethod
    async def reset_all(self):
        """Forget every user, group and token binding and restart group id generation"""
        pass
