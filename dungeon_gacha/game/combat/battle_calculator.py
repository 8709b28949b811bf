"""
Battle calculation system for damage and healing math.

This module holds the read-only formulas: defense mitigation, variance and
critical rolls, and heal amounts. Applying the numbers is the
CombatResolver's job.
"""
import math

import numpy as np

from ...core.data import DEFAULT_COMBAT_CONSTANTS, CombatConstants
from ...core.engine.rng import SeededRNG

DEFENSE_SCALE = 100


class BattleCalculator:
    """Damage and healing formulas."""

    @staticmethod
    def mitigation(defense: float) -> float:
        """Fraction of damage that gets through ``defense``."""
        if defense <= 0:
            return 1.0
        return 1 - defense / (defense + DEFENSE_SCALE)

    @staticmethod
    def mitigation_array(defenses: np.ndarray) -> np.ndarray:
        """Vectorized ``mitigation``; non-positive defense lets everything through."""
        clamped = np.maximum(defenses, 0.0)
        return 1 - clamped / (clamped + DEFENSE_SCALE)

    @staticmethod
    def base_damage(atk: float, defense: float, power: float = 1.0, ignore_defense: bool = False) -> float:
        """Mitigated damage before variance and crits.

        ATK 100 against DEF 100 gives exactly 50.
        """
        raw = atk * power
        if ignore_defense:
            return raw
        return raw * BattleCalculator.mitigation(defense)

    @staticmethod
    def roll_damage(
        base: float,
        rng: SeededRNG,
        constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
    ) -> tuple[int, bool]:
        """Apply variance and a crit roll to base damage.

        Always draws variance then crit, in that order, so the RNG sequence
        does not depend on the damage values.

        Returns:
            (damage, is_critical). Damage is at least 1 when base is positive.
        """
        variance = rng.uniform(1 - constants.damage_variance, 1 + constants.damage_variance)
        damage = math.floor(base * variance)
        is_critical = rng.chance(constants.crit_chance)
        if is_critical:
            damage = math.floor(damage * constants.crit_multiplier)
        if base <= 0:
            return 0, is_critical
        return max(1, damage), is_critical

    @staticmethod
    def heal_amount(atk: float, power: float) -> int:
        return max(0, math.floor(atk * power))

