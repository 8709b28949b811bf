"""Rebuild unit state from a battle result.

A BattleResult carries the starting snapshot of every unit plus the ordered
action log. Stepping through the log reproduces HP and alive state at any
point of the fight, which is how clients animate a battle and how the tests
check that HP never leaves [0, max HP].
"""

from dataclasses import dataclass
from typing import Iterator

from ..core.data import ActionType, Team
from ..core.engine.actions import BattleResult, CombatAction, UnitSnapshot


@dataclass
class ReplayUnit:
    """Mutable replay-side view of one unit."""
    id: str
    name: str
    team: Team
    max_hp: int
    current_hp: int
    is_alive: bool = True

    @classmethod
    def from_snapshot(cls, snapshot: UnitSnapshot) -> "ReplayUnit":
        return cls(
            id=snapshot.id,
            name=snapshot.name,
            team=snapshot.team,
            max_hp=snapshot.max_hp,
            current_hp=snapshot.current_hp,
            is_alive=snapshot.is_alive,
        )


class BattleReplay:
    """Applies logged actions one at a time to the initial snapshots."""

    def __init__(self, result: BattleResult):
        self.result = result
        self.units: dict[str, ReplayUnit] = {}
        self.position = 0
        self.reset()

    def reset(self) -> None:
        self.units = {s.id: ReplayUnit.from_snapshot(s) for s in self.result.initial_units}
        self.position = 0

    @property
    def finished(self) -> bool:
        return self.position >= len(self.result.action_log)

    def step(self) -> CombatAction:
        """Apply the next action and return it.

        Raises:
            IndexError: If the log is exhausted
        """
        if self.finished:
            raise IndexError("Replay has no more actions")
        action = self.result.action_log[self.position]
        self._apply(action)
        self.position += 1
        return action

    def __iter__(self) -> Iterator[CombatAction]:
        while not self.finished:
            yield self.step()

    def run_to_end(self) -> dict[str, int]:
        for _ in self:
            pass
        return self.hp_snapshot()

    def hp_snapshot(self) -> dict[str, int]:
        return {unit_id: unit.current_hp for unit_id, unit in self.units.items()}

    def living(self, team: Team) -> list[ReplayUnit]:
        return [u for u in self.units.values() if u.team is team and u.is_alive]

    def _damage(self, unit_id: str, amount: int) -> None:
        unit = self.units.get(unit_id)
        if unit is not None:
            unit.current_hp = max(0, unit.current_hp - amount)

    def _apply(self, action: CombatAction) -> None:
        if action.action_type in (ActionType.ATTACK, ActionType.ABILITY):
            if action.hits:
                for hit in action.hits:
                    self._damage(hit.target_id, hit.damage)
            elif action.target_id is not None:
                self._damage(action.target_id, action.damage)
        elif action.action_type is ActionType.HEAL:
            # Logged healing is already the amount restored
            target = self.units.get(action.target_id) if action.target_id else None
            if target is not None:
                target.current_hp += action.healing
        elif action.action_type is ActionType.SUMMON:
            if action.summoned_unit is not None:
                self.units[action.summoned_unit.id] = ReplayUnit.from_snapshot(action.summoned_unit)
        elif action.action_type is ActionType.DEATH:
            unit = self.units.get(action.actor_id)
            if unit is not None:
                unit.current_hp = 0
                unit.is_alive = False
