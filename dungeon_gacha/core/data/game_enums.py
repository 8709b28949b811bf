"""Centralized game enums and constants.

This module contains all core game enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.

Enums whose members appear in content documents carry their document spelling
as the member value, so ``Role("tank")`` parses a content entry directly.
"""

from enum import Enum


class Team(Enum):
    """Sides of a battle."""
    PLAYER = 0
    ENEMY = 1

    @property
    def opponent(self) -> "Team":
        return Team.ENEMY if self is Team.PLAYER else Team.PLAYER


class Role(Enum):
    """Combat roles with distinct stats, rows, and behaviors."""
    TANK = "tank"
    WARRIOR = "warrior"
    ARCHER = "archer"
    MAGE = "mage"
    ASSASSIN = "assassin"
    HEALER = "healer"
    SUMMONER = "summoner"


class Rarity(Enum):
    """Character rarity tiers, lowest first."""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class TargetingMode(Enum):
    """How an ability or basic attack chooses its targets."""
    SINGLE_CLOSEST = "single_closest"
    SINGLE_LOWEST_HP = "single_lowest_hp"
    SINGLE_BACK_ROW = "single_back_row"
    AOE_FIRST_N = "aoe_first_n"
    AOE_RANDOM_N = "aoe_random_n"
    HEAL_LOWEST_ALLY = "heal_lowest_ally"
    SUMMON_UNIT = "summon_unit"

    @property
    def is_offensive(self) -> bool:
        return self not in (TargetingMode.HEAL_LOWEST_ALLY, TargetingMode.SUMMON_UNIT)


class ActionType(Enum):
    """Kinds of entries in a battle action log."""
    ATTACK = "attack"
    ABILITY = "ability"
    HEAL = "heal"
    DEATH = "death"
    SUMMON = "summon"


ROLE_NAMES = {
    Role.TANK: "Tank",
    Role.WARRIOR: "Warrior",
    Role.ARCHER: "Archer",
    Role.MAGE: "Mage",
    Role.ASSASSIN: "Assassin",
    Role.HEALER: "Healer",
    Role.SUMMONER: "Summoner",
}

RARITY_NAMES = {
    Rarity.COMMON: "Common",
    Rarity.RARE: "Rare",
    Rarity.EPIC: "Epic",
    Rarity.LEGENDARY: "Legendary",
}
