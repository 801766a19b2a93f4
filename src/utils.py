import re
from typing import Optional

from models import GroupId
from models.group import Group


"""
Matches all single characters that have to be escaped, as documented at:

https://core.telegram.org/bots/api#markdownv2-style
"""
MARKDOWNV2_SPECIAL_CHARS_PATTERN = re.compile(r"[_*\[\]()~`>#+\-=|{}.!\\]")

DESCRIPTION_SEPARATOR = "|"


def escape(text: str) -> str:
    """Escapes special characters for MarkdownV2"""
    return re.sub(MARKDOWNV2_SPECIAL_CHARS_PATTERN, lambda match: f"\\{match.group()}", text)


def command_args(text: Optional[str], maxsplit: int = -1) -> list[str]:
    """
    Returns the whitespace separated arguments that follow the command in a message.
    With maxsplit, the last argument keeps the rest of the text, e.g. "/rename 3 Friday night" gives
    ["3", "Friday night"] for maxsplit=1.
    """
    splits = (text or "").split(maxsplit=1)
    if len(splits) < 2:
        return []
    return splits[1].split(maxsplit=maxsplit)


def parse_group_id(text: str) -> Optional[GroupId]:
    return int(text) if text.isdecimal() else None


def parse_name_and_description(text: str) -> tuple[str, Optional[str]]:
    """Splits "name | description" into its stripped parts. The description is None when absent or blank."""
    name, _, description = text.partition(DESCRIPTION_SEPARATOR)
    return name.strip(), description.strip() or None


def fmt_group(group: Group) -> str:
    """Formats a group and its games in Markdown V2"""
    lines = [rf"*{escape(group.name)}* \(id {group.id}\)"]
    if group.description:
        lines.append(f"_{escape(group.description)}_")
    lines.append("")
    if group.games:
        lines.extend(rf"{i}\. {escape(game.name)} \({escape(game.id)}\)"
                     for i, game in enumerate(group.games.values(), 1))
    else:
        lines.append(r"No games yet\!")
    return "\n".join(lines)
