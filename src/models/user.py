from dataclasses import dataclass, field

from models import UserName, GroupId


@dataclass
class User:
    name: UserName
    groups: list[GroupId] = field(default_factory=list)
