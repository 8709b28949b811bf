"""
Test utilities for creating units, catalogs and expedition configs.

Helpers here build small, fully specified objects so individual tests can
state exactly the numbers they depend on.
"""

from typing import Optional

from dungeon_gacha.core.data import Position, Rarity, Role, StatBlock, StatOverrides, Team, TargetingMode
from dungeon_gacha.core.events import LogMessage
from dungeon_gacha.game.content import (
    AbilityDefinition,
    CharacterDefinition,
    ContentCatalog,
    Dungeon,
    DungeonRoom,
    DungeonRoomEnemy,
    EnemyTemplate,
)
from dungeon_gacha.game.entities.unit import CombatUnit
from dungeon_gacha.game.expeditions import DurationTier, ExpeditionConfig


def make_unit(
    unit_id: str,
    role: Role = Role.WARRIOR,
    team: Team = Team.PLAYER,
    hp: int = 100,
    atk: int = 10,
    defense: int = 0,
    spd: int = 50,
    current_hp: int = -1,
    position: Optional[Position] = None,
    ability_ids: Optional[list[str]] = None,
    is_boss: bool = False,
) -> CombatUnit:
    """Create a combat unit with explicit stats."""
    return CombatUnit(
        id=unit_id,
        name=unit_id.replace("_", " ").title(),
        role=role,
        team=team,
        stats=StatBlock(hp=hp, atk=atk, defense=defense, spd=spd),
        current_hp=current_hp,
        position=position,
        ability_ids=list(ability_ids or []),
        is_boss=is_boss,
    )


def make_tier(
    hours: int = 1,
    total_waves: int = 3,
    required_power: float = 1000,
    **kwargs,
) -> DurationTier:
    return DurationTier(hours, total_waves=total_waves, required_power=required_power, **kwargs)


def make_expedition_config(*tiers: DurationTier, **kwargs) -> ExpeditionConfig:
    """Expedition config holding only the given tiers."""
    tiers = tiers or (make_tier(),)
    return ExpeditionConfig(duration_tiers={t.duration_hours: t for t in tiers}, **kwargs)


def make_small_catalog(rooms: int = 2, enemy_atk_mult: float = 1.0) -> ContentCatalog:
    """Catalog with one character per role family, a weak enemy and a dungeon."""
    abilities = [
        AbilityDefinition(id="ability_cleave", name="Cleave", targeting=TargetingMode.AOE_FIRST_N,
                          power_multiplier=0.6, target_count=3),
        AbilityDefinition(id="ability_heal", name="Heal", targeting=TargetingMode.HEAL_LOWEST_ALLY,
                          power_multiplier=2.0, heal_threshold=0.7),
    ]
    characters = [
        CharacterDefinition(id="hero", name="Hero", role=Role.WARRIOR, rarity=Rarity.EPIC,
                            ability_ids=("ability_cleave",)),
        CharacterDefinition(id="medic", name="Medic", role=Role.HEALER, rarity=Rarity.RARE,
                            ability_ids=("ability_heal",)),
        CharacterDefinition(id="rookie", name="Rookie", role=Role.ARCHER, rarity=Rarity.COMMON),
    ]
    enemies = [
        EnemyTemplate(id="rat", name="Rat", role=Role.ASSASSIN,
                      stat_overrides=StatOverrides(hp_mult=0.2, atk_mult=0.2 * enemy_atk_mult,
                                                   def_mult=0.2)),
    ]
    dungeon = Dungeon(
        id="cellar",
        name="Cellar",
        rooms=tuple(
            DungeonRoom(id=f"cellar_{n}", name=f"Cellar {n}", room_number=n,
                        enemies=(DungeonRoomEnemy("rat"), DungeonRoomEnemy("rat")),
                        xp_reward=10 * n)
            for n in range(1, rooms + 1)
        ),
        max_team_size=3,
    )
    return ContentCatalog.from_entries(
        characters=characters, enemies=enemies, abilities=abilities, dungeons=[dungeon]
    )


def emitted(spy, event_type) -> list:
    """Events of ``event_type`` passed to a Mock emitter, in order."""
    return [call.args[0] for call in spy.call_args_list if isinstance(call.args[0], event_type)]


def logged_messages(spy, level: Optional[str] = None) -> list[str]:
    return [e.message for e in emitted(spy, LogMessage) if level is None or e.level == level]
