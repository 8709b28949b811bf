"""Static game data and lookup tables.

This module provides a consistent pattern for storing static information about
roles and rarities, plus the tunable combat constants. Content documents may
override any of these tables; these are the defaults the engine falls back on.
"""

from dataclasses import dataclass, fields
from typing import Any, Optional

from .data_structures import StatBlock
from .game_enums import Rarity, Role, ROLE_NAMES


@dataclass(frozen=True)
class CombatConstants:
    """Tunable numbers for the battle engine."""
    max_turns: int = 30
    crit_chance: float = 0.05
    crit_multiplier: float = 2.0
    damage_variance: float = 0.1
    ability_trigger_chance: float = 0.25
    max_ascension: int = 6
    ascension_stat_bonus: float = 0.15
    level_stat_bonus: float = 0.1

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "CombatConstants":
        """Build constants from a config section, keeping defaults for missing keys."""
        if not data:
            return cls()
        known = {f.name: f.type for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                continue
            kwargs[key] = int(value) if known[key] in (int, "int") else float(value)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_COMBAT_CONSTANTS = CombatConstants()


@dataclass(frozen=True)
class PowerWeights:
    """Per-stat weights used to fold stats into a single power number."""
    hp: float
    atk: float
    defense: float
    spd: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.hp, self.atk, self.defense, self.spd)


@dataclass(frozen=True)
class RoleInfo:
    """Static information about a combat role."""
    name: str
    base_stats: StatBlock
    preferred_row: int
    power_weights: PowerWeights
    default_ability_id: str

    def get_gameplay_properties(self) -> dict[str, Any]:
        return {
            "base_stats": self.base_stats,
            "preferred_row": self.preferred_row,
            "default_ability_id": self.default_ability_id,
        }


ROLE_DATA: dict[Role, RoleInfo] = {
    Role.TANK: RoleInfo(
        name=ROLE_NAMES[Role.TANK],
        base_stats=StatBlock(hp=1000, atk=80, defense=150, spd=50),
        preferred_row=0,
        power_weights=PowerWeights(hp=0.5, atk=2.0, defense=2.5, spd=2.0),
        default_ability_id="ability_taunt",
    ),
    Role.WARRIOR: RoleInfo(
        name=ROLE_NAMES[Role.WARRIOR],
        base_stats=StatBlock(hp=700, atk=120, defense=80, spd=70),
        preferred_row=0,
        power_weights=PowerWeights(hp=0.8, atk=3.0, defense=1.5, spd=1.5),
        default_ability_id="ability_cleave",
    ),
    Role.ARCHER: RoleInfo(
        name=ROLE_NAMES[Role.ARCHER],
        base_stats=StatBlock(hp=500, atk=150, defense=40, spd=90),
        preferred_row=2,
        power_weights=PowerWeights(hp=0.5, atk=3.5, defense=1.0, spd=2.5),
        default_ability_id="ability_multishot",
    ),
    Role.MAGE: RoleInfo(
        name=ROLE_NAMES[Role.MAGE],
        base_stats=StatBlock(hp=450, atk=180, defense=30, spd=60),
        preferred_row=2,
        power_weights=PowerWeights(hp=0.5, atk=3.5, defense=1.0, spd=2.0),
        default_ability_id="ability_fireball",
    ),
    Role.ASSASSIN: RoleInfo(
        name=ROLE_NAMES[Role.ASSASSIN],
        base_stats=StatBlock(hp=550, atk=140, defense=50, spd=120),
        preferred_row=1,
        power_weights=PowerWeights(hp=0.5, atk=3.0, defense=1.0, spd=2.5),
        default_ability_id="ability_backstab",
    ),
    Role.HEALER: RoleInfo(
        name=ROLE_NAMES[Role.HEALER],
        base_stats=StatBlock(hp=600, atk=60, defense=60, spd=80),
        preferred_row=2,
        power_weights=PowerWeights(hp=1.0, atk=4.0, defense=1.5, spd=2.0),
        default_ability_id="ability_heal",
    ),
    Role.SUMMONER: RoleInfo(
        name=ROLE_NAMES[Role.SUMMONER],
        base_stats=StatBlock(hp=550, atk=100, defense=50, spd=65),
        preferred_row=2,
        power_weights=PowerWeights(hp=0.8, atk=3.5, defense=1.0, spd=2.5),
        default_ability_id="ability_summon",
    ),
}

ROLE_BASE_STATS: dict[Role, StatBlock] = {role: info.base_stats for role, info in ROLE_DATA.items()}
ROLE_PREFERRED_ROW: dict[Role, int] = {role: info.preferred_row for role, info in ROLE_DATA.items()}
ROLE_POWER_WEIGHTS: dict[Role, PowerWeights] = {role: info.power_weights for role, info in ROLE_DATA.items()}
DEFAULT_ROLE_ABILITIES: dict[Role, str] = {role: info.default_ability_id for role, info in ROLE_DATA.items()}

# Used when a stat block has no role attached
DEFAULT_POWER_WEIGHTS = PowerWeights(hp=0.6, atk=3.0, defense=1.5, spd=2.0)

DEFAULT_RARITY_MULTIPLIERS: dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.RARE: 1.1,
    Rarity.EPIC: 1.25,
    Rarity.LEGENDARY: 1.5,
}

DEFAULT_LEVEL_THRESHOLDS: tuple[int, ...] = (
    10, 25, 50, 80, 120, 170, 230, 300, 400, 500,
    620, 760, 920, 1100, 1300, 1520, 1760, 2020, 2300, 2600,
)

MAX_SUMMONS_LIMIT = 3
