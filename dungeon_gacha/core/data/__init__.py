"""Core data structures and definitions.

This package contains fundamental data types and game definitions:
- data_structures.py: Position, StatBlock and StatOverrides value types
- game_enums.py: Centralized enums for teams, roles, rarities, targeting
- game_info.py: Static role tables and combat constants
"""

from .data_structures import GRID_COLS, GRID_ROWS, Position, StatBlock, StatOverrides
from .game_enums import ActionType, Rarity, Role, TargetingMode, Team, RARITY_NAMES, ROLE_NAMES
from .game_info import (
    DEFAULT_COMBAT_CONSTANTS,
    DEFAULT_LEVEL_THRESHOLDS,
    DEFAULT_POWER_WEIGHTS,
    DEFAULT_RARITY_MULTIPLIERS,
    DEFAULT_ROLE_ABILITIES,
    MAX_SUMMONS_LIMIT,
    ROLE_BASE_STATS,
    ROLE_DATA,
    ROLE_POWER_WEIGHTS,
    ROLE_PREFERRED_ROW,
    CombatConstants,
    PowerWeights,
    RoleInfo,
)

__all__ = [
    "GRID_ROWS",
    "GRID_COLS",
    "Position",
    "StatBlock",
    "StatOverrides",
    "ActionType",
    "Rarity",
    "Role",
    "TargetingMode",
    "Team",
    "RARITY_NAMES",
    "ROLE_NAMES",
    "CombatConstants",
    "PowerWeights",
    "RoleInfo",
    "ROLE_DATA",
    "ROLE_BASE_STATS",
    "ROLE_PREFERRED_ROW",
    "ROLE_POWER_WEIGHTS",
    "DEFAULT_ROLE_ABILITIES",
    "DEFAULT_POWER_WEIGHTS",
    "DEFAULT_RARITY_MULTIPLIERS",
    "DEFAULT_LEVEL_THRESHOLDS",
    "DEFAULT_COMBAT_CONSTANTS",
    "MAX_SUMMONS_LIMIT",
]
