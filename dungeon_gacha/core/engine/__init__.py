"""Deterministic engine primitives.

- rng.py: SeededRNG, the only random source the engine uses
- actions.py: CombatAction log entries and the BattleResult record
"""

from .actions import AoeHit, BattleResult, CombatAction, UnitSnapshot
from .rng import SeededRNG

__all__ = [
    "AoeHit",
    "BattleResult",
    "CombatAction",
    "UnitSnapshot",
    "SeededRNG",
]
