"""Immutable, id-indexed view of loaded content.

The catalog is what the rest of the engine reads: the unit factory resolves
abilities and summon templates through it, and battle simulations receive
its ability mapping at construction time.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from ...core.data import (
    DEFAULT_COMBAT_CONSTANTS,
    DEFAULT_LEVEL_THRESHOLDS,
    DEFAULT_RARITY_MULTIPLIERS,
    DEFAULT_ROLE_ABILITIES,
    ROLE_BASE_STATS,
    CombatConstants,
    Rarity,
    Role,
    StatBlock,
)
from ..expeditions.expedition_structures import ExpeditionConfig
from .content_structures import (
    AbilityDefinition,
    CharacterDefinition,
    Dungeon,
    EnemyTemplate,
    GachaConfig,
    SummonTemplate,
)

CURRENT_CONTENT_VERSION = 3


def _index(entries: Any) -> Mapping[str, Any]:
    if isinstance(entries, Mapping):
        return MappingProxyType(dict(entries))
    return MappingProxyType({entry.id: entry for entry in entries})


@dataclass(frozen=True)
class ContentCatalog:
    """All content the engine needs, keyed by id."""

    characters: Mapping[str, CharacterDefinition] = field(default_factory=dict)
    enemies: Mapping[str, EnemyTemplate] = field(default_factory=dict)
    summons: Mapping[str, SummonTemplate] = field(default_factory=dict)
    abilities: Mapping[str, AbilityDefinition] = field(default_factory=dict)
    dungeons: Mapping[str, Dungeon] = field(default_factory=dict)
    role_stats: Mapping[Role, StatBlock] = field(default_factory=lambda: dict(ROLE_BASE_STATS))
    rarity_multipliers: Mapping[Rarity, float] = field(
        default_factory=lambda: dict(DEFAULT_RARITY_MULTIPLIERS)
    )
    level_thresholds: tuple[int, ...] = DEFAULT_LEVEL_THRESHOLDS
    gacha: GachaConfig = field(default_factory=GachaConfig)
    expedition: ExpeditionConfig = field(default_factory=ExpeditionConfig)
    combat: CombatConstants = DEFAULT_COMBAT_CONSTANTS
    version: int = CURRENT_CONTENT_VERSION

    def __post_init__(self):
        # Frozen dataclass: freeze the lookups into read-only mappings
        for name in ("characters", "enemies", "summons", "abilities", "dungeons"):
            object.__setattr__(self, name, _index(getattr(self, name)))
        object.__setattr__(self, "role_stats", MappingProxyType(dict(self.role_stats)))
        object.__setattr__(self, "rarity_multipliers", MappingProxyType(dict(self.rarity_multipliers)))
        object.__setattr__(self, "level_thresholds", tuple(self.level_thresholds))

    @classmethod
    def from_entries(
        cls,
        characters: Iterable[CharacterDefinition] = (),
        enemies: Iterable[EnemyTemplate] = (),
        summons: Iterable[SummonTemplate] = (),
        abilities: Iterable[AbilityDefinition] = (),
        dungeons: Iterable[Dungeon] = (),
        **tuning: Any,
    ) -> "ContentCatalog":
        """Build a catalog from plain lists of definitions."""
        return cls(
            characters=list(characters),
            enemies=list(enemies),
            summons=list(summons),
            abilities=list(abilities),
            dungeons=list(dungeons),
            **tuning,
        )

    # Lookups that promise presence raise KeyError
    def get_ability(self, ability_id: str) -> AbilityDefinition:
        return self.abilities[ability_id]

    def get_character(self, character_id: str) -> CharacterDefinition:
        return self.characters[character_id]

    def get_enemy(self, enemy_id: str) -> EnemyTemplate:
        return self.enemies[enemy_id]

    def get_dungeon(self, dungeon_id: str) -> Dungeon:
        return self.dungeons[dungeon_id]

    def find_ability(self, ability_id: str) -> Optional[AbilityDefinition]:
        return self.abilities.get(ability_id)

    def base_stats_for(self, role: Role) -> StatBlock:
        return self.role_stats.get(role, ROLE_BASE_STATS[role])

    def default_ability_for(self, role: Role) -> Optional[AbilityDefinition]:
        return self.abilities.get(DEFAULT_ROLE_ABILITIES[role])

    def resolve_summon(self, summon_id: str) -> Optional[SummonTemplate]:
        """Find a summon template by id.

        Dedicated summon entries win; enemy templates and characters can also
        be summoned by id.
        """
        if summon_id in self.summons:
            return self.summons[summon_id]
        if summon_id in self.enemies:
            return SummonTemplate.from_enemy(self.enemies[summon_id])
        if summon_id in self.characters:
            return SummonTemplate.from_character(self.characters[summon_id])
        return None

    def abilities_for_role(self, role: Role) -> list[AbilityDefinition]:
        return [a for a in self.abilities.values() if not a.allowed_roles or role in a.allowed_roles]

    def characters_by_rarity(self, rarity: Rarity) -> list[CharacterDefinition]:
        return [c for c in self.characters.values() if c.rarity is rarity]

    def characters_by_role(self, role: Role) -> list[CharacterDefinition]:
        return [c for c in self.characters.values() if c.role is role]
