from dataclasses import dataclass, field
from typing import Any

from models import GameId


@dataclass(frozen=True)
class Game:
    id: GameId
    name: str
    details: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
