"""Combat resolution package.

- targeting.py: target selection per targeting mode
- battle_calculator.py: damage/heal formulas
- combat_resolver.py: applies damage and healing, records deaths
- summon_manager.py: summon caps and placement
- ability_resolver.py: per-turn ability-or-attack decision
"""

from .ability_resolver import AbilityResolver, TurnOutcome
from .battle_calculator import BattleCalculator
from .combat_resolver import CombatResolver, CombatResult
from .summon_manager import SummonManager, first_free_cell, occupancy_grid
from .targeting import TargetingResolver

__all__ = [
    "AbilityResolver",
    "TurnOutcome",
    "BattleCalculator",
    "CombatResolver",
    "CombatResult",
    "SummonManager",
    "first_free_cell",
    "occupancy_grid",
    "TargetingResolver",
]
