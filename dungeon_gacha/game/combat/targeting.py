"""Target selection for abilities and basic attacks.

Each targeting mode is a pure rule over the two rosters. Dead units are never
candidates. Ties are broken either by roster order or by the battle's seeded
RNG, depending on the mode, so selection is always reproducible.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from ...core.data import Position, TargetingMode
from ...core.engine.rng import SeededRNG

if TYPE_CHECKING:
    from ..entities.unit import CombatUnit

_ORIGIN = Position(0, 0)


def _living(units: Sequence["CombatUnit"]) -> list["CombatUnit"]:
    return [u for u in units if u.is_alive]


class TargetingResolver:
    """Selects targets according to a TargetingMode."""

    def __init__(self, rng: SeededRNG):
        self.rng = rng

    def select_targets(
        self,
        mode: TargetingMode,
        actor: "CombatUnit",
        allies: Sequence["CombatUnit"],
        enemies: Sequence["CombatUnit"],
        count: int = 1,
        heal_threshold: float = 0.0,
    ) -> list["CombatUnit"]:
        """Return the targets for ``mode``; an empty list means no valid target."""
        if mode is TargetingMode.SUMMON_UNIT:
            return []
        if mode is TargetingMode.HEAL_LOWEST_ALLY:
            target = self.lowest_hp_ally(allies, heal_threshold)
            return [target] if target is not None else []

        candidates = _living(enemies)
        if not candidates:
            return []

        if mode is TargetingMode.SINGLE_CLOSEST:
            return [self.closest(actor, candidates)]
        if mode is TargetingMode.SINGLE_LOWEST_HP:
            return [self.lowest_hp(candidates)]
        if mode is TargetingMode.SINGLE_BACK_ROW:
            return [self.back_row(candidates)]
        if mode is TargetingMode.AOE_FIRST_N:
            return self.first_n(candidates, count)
        if mode is TargetingMode.AOE_RANDOM_N:
            return self.rng.sample(candidates, count)
        return []

    def closest(self, actor: "CombatUnit", candidates: list["CombatUnit"]) -> "CombatUnit":
        """Nearest by row (front rows first), then column distance; ties keep roster order."""
        actor_pos = actor.position or _ORIGIN

        def distance(unit: "CombatUnit") -> tuple[int, int]:
            pos = unit.position or _ORIGIN
            return (actor_pos.row + pos.row, abs(actor_pos.col - pos.col))

        return min(candidates, key=distance)

    def lowest_hp(self, candidates: list["CombatUnit"]) -> "CombatUnit":
        lowest = min(u.current_hp for u in candidates)
        tied = [u for u in candidates if u.current_hp == lowest]
        return tied[0] if len(tied) == 1 else self.rng.pick(tied)

    def back_row(self, candidates: list["CombatUnit"]) -> "CombatUnit":
        furthest = max((u.position or _ORIGIN).row for u in candidates)
        tied = [u for u in candidates if (u.position or _ORIGIN).row == furthest]
        return tied[0] if len(tied) == 1 else self.rng.pick(tied)

    @staticmethod
    def first_n(candidates: list["CombatUnit"], count: int) -> list["CombatUnit"]:
        """First ``count`` in roster order, with bosses moved behind everyone else."""
        ordered = sorted(candidates, key=lambda u: u.is_boss)
        return ordered[:max(0, count)]

    @staticmethod
    def lowest_hp_ally(allies: Sequence["CombatUnit"], threshold: float) -> Optional["CombatUnit"]:
        """Most injured living ally below ``threshold`` of max HP, or None."""
        wounded = [u for u in _living(allies) if u.current_hp < threshold * u.max_hp]
        if not wounded:
            return None
        return min(wounded, key=lambda u: u.hp_ratio)
