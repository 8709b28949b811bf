"""Character collection: levels, XP and ascension.

A player's collection maps character ids to OwnedCharacter entries. Levels go
up automatically as XP crosses the level-threshold table; ascension is bought
with duplicate copies pulled from the gacha.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, MutableMapping, Optional, Sequence

from ..core.data import DEFAULT_LEVEL_THRESHOLDS, Team
from ..core.events import LogMessage
from .content.content_catalog import ContentCatalog
from .entities.unit import CombatUnit
from .entities.unit_templates import create_character_unit


@dataclass
class OwnedCharacter:
    """A character in the player's collection."""
    character_id: str
    level: int = 1
    ascension: int = 0
    duplicates: int = 0
    xp: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "level": self.level,
            "ascension": self.ascension,
            "duplicates": self.duplicates,
            "xp": self.xp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OwnedCharacter":
        return cls(
            character_id=str(data["character_id"]),
            level=int(data.get("level", 1)),
            ascension=int(data.get("ascension", 0)),
            duplicates=int(data.get("duplicates", 0)),
            xp=int(data.get("xp", 0)),
        )


Collection = MutableMapping[str, OwnedCharacter]


def _thresholds(thresholds: Optional[Sequence[int]]) -> Sequence[int]:
    return thresholds if thresholds else DEFAULT_LEVEL_THRESHOLDS


def max_level(thresholds: Optional[Sequence[int]] = None) -> int:
    return len(_thresholds(thresholds)) + 1


def xp_for_level(level: int, thresholds: Optional[Sequence[int]] = None) -> Optional[int]:
    """XP needed to go from ``level`` to the next one; None at max level."""
    table = _thresholds(thresholds)
    index = level - 1
    if index < 0 or index >= len(table):
        return None
    return table[index]


def add_character(collection: Collection, character_id: str) -> OwnedCharacter:
    """Add a pulled character: a new entry, or one more duplicate of an owned one."""
    owned = collection.get(character_id)
    if owned is None:
        owned = OwnedCharacter(character_id)
        collection[character_id] = owned
    else:
        owned.duplicates += 1
    return owned


def award_xp(
    collection: Collection,
    character_ids: Iterable[str],
    total_xp: int,
    thresholds: Optional[Sequence[int]] = None,
    event_emitter: Optional[Callable] = None,
) -> dict[str, int]:
    """Split ``total_xp`` evenly (rounded down) and level characters up.

    Ids not in the collection still count towards the split but receive
    nothing, matching a party where some members are borrowed.

    Returns:
        Levels gained per character id that received XP
    """
    ids = list(character_ids)
    if not ids or total_xp <= 0:
        return {}
    xp_each = math.floor(total_xp / len(ids))
    if xp_each <= 0:
        return {}

    table = _thresholds(thresholds)
    gained: dict[str, int] = {}
    for character_id in ids:
        owned = collection.get(character_id)
        if owned is None:
            continue
        owned.xp += xp_each
        start_level = owned.level
        while True:
            needed = xp_for_level(owned.level, table)
            if needed is None or owned.xp < needed:
                break
            owned.xp -= needed
            owned.level += 1
        gained[character_id] = owned.level - start_level

        if gained[character_id] and event_emitter is not None:
            event_emitter(LogMessage(
                turn=0,
                message=f"{character_id} reached level {owned.level}",
                category="PROGRESSION",
                source="progression",
            ))
    return gained


def ascend_character(
    owned: OwnedCharacter,
    ascension_costs: Sequence[int],
    max_ascension: int,
) -> Optional[OwnedCharacter]:
    """Spend duplicates to raise ascension by one.

    Returns:
        The updated entry, or None when at max ascension or short on duplicates
    """
    if owned.ascension >= max_ascension or owned.ascension >= len(ascension_costs):
        return None
    cost = ascension_costs[owned.ascension]
    if owned.duplicates < cost:
        return None
    owned.duplicates -= cost
    owned.ascension += 1
    return owned


def build_party(
    catalog: ContentCatalog,
    collection: Collection,
    character_ids: Iterable[str],
    event_emitter: Optional[Callable] = None,
) -> list[CombatUnit]:
    """Combat units for owned characters at their current level and ascension.

    Raises:
        KeyError: If an id is not owned or not in the catalog
    """
    party = []
    for character_id in character_ids:
        owned = collection[character_id]
        party.append(create_character_unit(
            catalog,
            catalog.get_character(character_id),
            level=owned.level,
            ascension=owned.ascension,
            team=Team.PLAYER,
            event_emitter=event_emitter,
        ))
    return party
