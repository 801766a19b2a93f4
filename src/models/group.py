from dataclasses import dataclass, field, replace

from models import GroupId, GameId
from models.game import Game


@dataclass
class Group:
    id: GroupId
    name: str
    description: str = ""
    games: dict[GameId, Game] = field(default_factory=dict)

    def snapshot(self) -> "Group":
        """Copy that can be handed out without exposing the stored games mapping"""
        return replace(self, games=dict(self.games))
