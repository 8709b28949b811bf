"""Stat model: derived combat stats and power aggregation.

Stats derive from the role's base block:

    stat = floor(base * rarity * (1 + (level - 1) * level_bonus)
                 * (1 + ascension * ascension_bonus) * override)

SPD skips the level and ascension terms. Power folds a stat block into one
number with role-specific weights and is only used by expeditions.
"""

import math
from typing import Iterable, Mapping, Optional

import numpy as np

from ...core.data import (
    DEFAULT_COMBAT_CONSTANTS,
    DEFAULT_POWER_WEIGHTS,
    DEFAULT_RARITY_MULTIPLIERS,
    ROLE_POWER_WEIGHTS,
    CombatConstants,
    PowerWeights,
    Rarity,
    Role,
    StatBlock,
    StatOverrides,
)


def compute_stats(
    base: StatBlock,
    rarity: Rarity,
    level: int = 1,
    ascension: int = 0,
    overrides: Optional[StatOverrides] = None,
    constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
    rarity_multipliers: Optional[Mapping[Rarity, float]] = None,
) -> StatBlock:
    """Derive combat stats for one unit.

    Level and ascension are used as given; clamping them is the caller's job.

    Args:
        base: Role base stats
        rarity: Rarity tier, looked up in rarity_multipliers
        level: Character level (1-based)
        ascension: Ascension tier (0-based)
        overrides: Optional per-template stat multipliers
        constants: Combat constants providing the level and ascension bonuses
        rarity_multipliers: Rarity table, defaults to DEFAULT_RARITY_MULTIPLIERS

    Returns:
        StatBlock with every stat floored to an integer
    """
    multipliers = rarity_multipliers or DEFAULT_RARITY_MULTIPLIERS
    rarity_mult = multipliers.get(rarity, 1.0)
    overrides = overrides or StatOverrides()

    level_mult = 1 + (level - 1) * constants.level_stat_bonus
    ascension_mult = 1 + ascension * constants.ascension_stat_bonus

    def scaled(value: int, override: float) -> int:
        return math.floor(value * rarity_mult * level_mult * ascension_mult * override)

    return StatBlock(
        hp=scaled(base.hp, overrides.hp_mult),
        atk=scaled(base.atk, overrides.atk_mult),
        defense=scaled(base.defense, overrides.def_mult),
        spd=math.floor(base.spd * rarity_mult * overrides.spd_mult),
    )


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5).astype(np.int64)


def _weights_for(role: Optional[Role], table: Mapping[Role, PowerWeights]) -> PowerWeights:
    if role is None:
        return DEFAULT_POWER_WEIGHTS
    return table.get(role, DEFAULT_POWER_WEIGHTS)


def calculate_character_power(
    stats: StatBlock,
    role: Optional[Role] = None,
    weights_table: Mapping[Role, PowerWeights] = ROLE_POWER_WEIGHTS,
) -> int:
    """Weighted stat sum for one character, rounded half up."""
    weights = np.array(_weights_for(role, weights_table).as_tuple(), dtype=np.float64)
    return int(_round_half_up(np.array([stats.to_array() @ weights]))[0])


def calculate_team_power(
    members: Iterable[tuple[StatBlock, Optional[Role]]],
    weights_table: Mapping[Role, PowerWeights] = ROLE_POWER_WEIGHTS,
) -> int:
    """Sum of per-character power over a team.

    Each member is rounded before summing, so the team total equals the sum
    of ``calculate_character_power`` over the same members.
    """
    members = list(members)
    if not members:
        return 0

    stat_matrix = np.vstack([stats.to_array() for stats, _ in members])
    weight_matrix = np.array(
        [_weights_for(role, weights_table).as_tuple() for _, role in members],
        dtype=np.float64,
    )
    per_member = _round_half_up(np.einsum("ij,ij->i", stat_matrix, weight_matrix))
    return int(per_member.sum())
