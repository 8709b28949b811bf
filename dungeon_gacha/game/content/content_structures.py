"""Data structures for content definition and loading.

This module contains the admin-authored definitions the engine consumes:
abilities, playable characters, enemy and summon templates, dungeons and the
gacha tuning. All of them are immutable once loaded and are built from plain
content-document dictionaries through their ``from_dict`` constructors.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ...core.data import Position, Rarity, Role, StatOverrides, TargetingMode


class ContentError(ValueError):
    """Raised when a content document is structurally invalid."""


def _parse_enum(enum_cls, value: Any, what: str, owner: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise ContentError(f"{owner}: unknown {what} '{value}'")


def _require_id(data: dict[str, Any], kind: str) -> str:
    entry_id = data.get("id")
    if not entry_id:
        raise ContentError(f"{kind} entry is missing an 'id': {data!r}")
    return str(entry_id)


def _ability_ids(data: dict[str, Any]) -> tuple[str, ...]:
    """Accept either an ``ability_ids`` list or a single ``ability_id``."""
    if data.get("ability_ids"):
        return tuple(str(a) for a in data["ability_ids"])
    if data.get("ability_id"):
        return (str(data["ability_id"]),)
    return ()


@dataclass(frozen=True)
class AbilityDefinition:
    """An ability a unit may trigger instead of its basic attack."""

    id: str
    name: str
    targeting: TargetingMode
    power_multiplier: float = 1.0
    target_count: int = 1
    ignore_defense: bool = False
    heal_threshold: float = 0.0
    cooldown: int = 0
    description: str = ""
    allowed_roles: tuple[Role, ...] = ()

    @property
    def is_heal(self) -> bool:
        return self.targeting is TargetingMode.HEAL_LOWEST_ALLY

    @property
    def is_summon(self) -> bool:
        return self.targeting is TargetingMode.SUMMON_UNIT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AbilityDefinition":
        ability_id = _require_id(data, "Ability")
        return cls(
            id=ability_id,
            name=data.get("name", ability_id),
            targeting=_parse_enum(TargetingMode, data.get("targeting"), "targeting", ability_id),
            power_multiplier=float(data.get("power_multiplier", 1.0)),
            target_count=max(1, int(data.get("target_count", 1))),
            ignore_defense=bool(data.get("ignore_defense", False)),
            heal_threshold=float(data.get("heal_threshold", 0.0)),
            cooldown=max(0, int(data.get("cooldown", 0))),
            description=data.get("description", ""),
            allowed_roles=tuple(
                _parse_enum(Role, r, "role", ability_id) for r in data.get("allowed_roles", [])
            ),
        )


@dataclass(frozen=True)
class CharacterDefinition:
    """A collectible, playable character."""

    id: str
    name: str
    role: Role
    rarity: Rarity
    ability_ids: tuple[str, ...] = ()
    summon_ids: tuple[str, ...] = ()
    max_summons: int = 1
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CharacterDefinition":
        char_id = _require_id(data, "Character")
        return cls(
            id=char_id,
            name=data.get("name", char_id),
            role=_parse_enum(Role, data.get("role"), "role", char_id),
            rarity=_parse_enum(Rarity, data.get("rarity", "common"), "rarity", char_id),
            ability_ids=_ability_ids(data),
            summon_ids=tuple(str(s) for s in data.get("summon_ids", [])),
            max_summons=int(data.get("max_summons", 1)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class EnemyTemplate:
    """An enemy (or boss) placed in dungeon rooms."""

    id: str
    name: str
    role: Role
    rarity: Rarity = Rarity.COMMON
    level: int = 1
    ascension: int = 0
    ability_ids: tuple[str, ...] = ()
    is_boss: bool = False
    stat_overrides: StatOverrides = field(default_factory=StatOverrides)
    summon_ids: tuple[str, ...] = ()
    max_summons: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnemyTemplate":
        enemy_id = _require_id(data, "Enemy")
        return cls(
            id=enemy_id,
            name=data.get("name", enemy_id),
            role=_parse_enum(Role, data.get("role"), "role", enemy_id),
            rarity=_parse_enum(Rarity, data.get("rarity", "common"), "rarity", enemy_id),
            level=int(data.get("level", 1)),
            ascension=int(data.get("ascension", 0)),
            ability_ids=_ability_ids(data),
            is_boss=bool(data.get("is_boss", False)),
            stat_overrides=StatOverrides.from_dict(data.get("stat_overrides")),
            summon_ids=tuple(str(s) for s in data.get("summon_ids", [])),
            max_summons=int(data.get("max_summons", 1)),
        )


@dataclass(frozen=True)
class SummonTemplate:
    """A unit a summoner can bring into battle.

    Level and ascension left as None are inherited from the summoner.
    """

    id: str
    name: str
    role: Role
    rarity: Rarity = Rarity.COMMON
    level: Optional[int] = None
    ascension: Optional[int] = None
    stat_overrides: StatOverrides = field(default_factory=StatOverrides)
    ability_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SummonTemplate":
        summon_id = _require_id(data, "Summon")
        level = data.get("level")
        ascension = data.get("ascension")
        return cls(
            id=summon_id,
            name=data.get("name", summon_id),
            role=_parse_enum(Role, data.get("role"), "role", summon_id),
            rarity=_parse_enum(Rarity, data.get("rarity", "common"), "rarity", summon_id),
            level=int(level) if level is not None else None,
            ascension=int(ascension) if ascension is not None else None,
            stat_overrides=StatOverrides.from_dict(data.get("stat_overrides")),
            ability_ids=_ability_ids(data),
        )

    @classmethod
    def from_enemy(cls, enemy: EnemyTemplate) -> "SummonTemplate":
        return cls(
            id=enemy.id,
            name=enemy.name,
            role=enemy.role,
            rarity=enemy.rarity,
            level=enemy.level,
            ascension=enemy.ascension,
            stat_overrides=enemy.stat_overrides,
            ability_ids=enemy.ability_ids,
        )

    @classmethod
    def from_character(cls, character: CharacterDefinition) -> "SummonTemplate":
        return cls(
            id=character.id,
            name=character.name,
            role=character.role,
            rarity=character.rarity,
            ability_ids=character.ability_ids,
        )


@dataclass(frozen=True)
class DungeonRoomEnemy:
    """Enemy placement in a dungeon room; position is auto-assigned when None."""

    enemy_template_id: str
    position: Optional[Position] = None

    @classmethod
    def from_dict(cls, data: Any) -> "DungeonRoomEnemy":
        if isinstance(data, str):
            return cls(enemy_template_id=data)
        if not data.get("enemy_template_id"):
            raise ContentError(f"Room enemy entry is missing 'enemy_template_id': {data!r}")
        position = data.get("position")
        return cls(
            enemy_template_id=str(data["enemy_template_id"]),
            position=Position.from_dict(position) if position else None,
        )


@dataclass(frozen=True)
class DungeonRoom:
    """One encounter inside a dungeon."""

    id: str
    name: str
    room_number: int
    enemies: tuple[DungeonRoomEnemy, ...] = ()
    is_boss: bool = False
    difficulty_mult: float = 1.0
    xp_reward: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any], default_number: int = 1) -> "DungeonRoom":
        room_id = _require_id(data, "Dungeon room")
        return cls(
            id=room_id,
            name=data.get("name", room_id),
            room_number=int(data.get("room_number", default_number)),
            enemies=tuple(DungeonRoomEnemy.from_dict(e) for e in data.get("enemies", [])),
            is_boss=bool(data.get("is_boss", False)),
            difficulty_mult=float(data.get("difficulty_mult", 1.0)),
            xp_reward=int(data.get("xp_reward", 0)),
        )


@dataclass(frozen=True)
class Dungeon:
    """A sequence of rooms played in order."""

    id: str
    name: str
    rooms: tuple[DungeonRoom, ...] = ()
    description: str = ""
    max_team_size: int = 5

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dungeon":
        dungeon_id = _require_id(data, "Dungeon")
        rooms = [
            DungeonRoom.from_dict(room, default_number=index + 1)
            for index, room in enumerate(data.get("rooms", []))
        ]
        rooms.sort(key=lambda r: r.room_number)
        return cls(
            id=dungeon_id,
            name=data.get("name", dungeon_id),
            rooms=tuple(rooms),
            description=data.get("description", ""),
            max_team_size=int(data.get("max_team_size", 5)),
        )


DEFAULT_GACHA_RATES: dict[Rarity, float] = {
    Rarity.COMMON: 0.74,
    Rarity.RARE: 0.20,
    Rarity.EPIC: 0.05,
    Rarity.LEGENDARY: 0.01,
}

DEFAULT_STARLIGHT_VALUES: dict[Rarity, int] = {
    Rarity.COMMON: 10,
    Rarity.RARE: 50,
    Rarity.EPIC: 200,
    Rarity.LEGENDARY: 1000,
}

DEFAULT_ASCENSION_COSTS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)


@dataclass(frozen=True)
class GachaConfig:
    """Gacha pool and pull rates."""

    character_pool: tuple[str, ...] = ()
    rates: dict[Rarity, float] = field(default_factory=lambda: dict(DEFAULT_GACHA_RATES))
    ascension_costs: tuple[int, ...] = DEFAULT_ASCENSION_COSTS
    starlight_values: dict[Rarity, int] = field(default_factory=lambda: dict(DEFAULT_STARLIGHT_VALUES))

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "GachaConfig":
        if not data:
            return cls()
        rates = dict(DEFAULT_GACHA_RATES)
        for name, value in (data.get("rates") or {}).items():
            rates[_parse_enum(Rarity, name, "rarity", "gacha rates")] = float(value)
        starlight = dict(DEFAULT_STARLIGHT_VALUES)
        for name, value in (data.get("starlight_values") or {}).items():
            starlight[_parse_enum(Rarity, name, "rarity", "starlight values")] = int(value)
        return cls(
            character_pool=tuple(str(c) for c in data.get("character_pool", [])),
            rates=rates,
            ascension_costs=tuple(int(c) for c in data.get("ascension_costs", DEFAULT_ASCENSION_COSTS)),
            starlight_values=starlight,
        )
