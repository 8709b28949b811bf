"""
Combat resolution system for applying damage and healing.

This module takes already-chosen targets, rolls the numbers through the
BattleCalculator and writes the results into unit state. It produces the
action log entries for each resolution: the attack/ability/heal entry first,
followed by one death entry per unit that dropped to zero HP.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from ...core.data import DEFAULT_COMBAT_CONSTANTS, ActionType, CombatConstants
from ...core.engine.actions import AoeHit, CombatAction
from ...core.engine.rng import SeededRNG
from ...core.events import LogMessage
from .battle_calculator import BattleCalculator

if TYPE_CHECKING:
    from ..entities.unit import CombatUnit


@dataclass
class CombatResult:
    """Log entries and casualties produced by one resolution."""
    actions: list[CombatAction] = field(default_factory=list)
    defeated: list["CombatUnit"] = field(default_factory=list)
    damage_dealt: dict[str, int] = field(default_factory=dict)


class CombatResolver:
    """Handles damage/heal application and death bookkeeping."""

    def __init__(
        self,
        rng: SeededRNG,
        constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
        event_emitter: Optional[Callable] = None,
    ):
        self.rng = rng
        self.constants = constants
        self.emit_event = event_emitter or (lambda e: None)

    def _emit_log(self, message: str, turn: int, category: str = "BATTLE", level: str = "INFO") -> None:
        self.emit_event(LogMessage(turn=turn, message=message, category=category,
                                   level=level, source="CombatResolver"))

    def resolve_attack(
        self,
        actor: "CombatUnit",
        targets: list["CombatUnit"],
        round_number: int,
        power: float = 1.0,
        ignore_defense: bool = False,
        ability_name: Optional[str] = None,
        aoe: bool = False,
    ) -> CombatResult:
        """Deal damage from ``actor`` to each target.

        Args:
            actor: The attacking unit
            targets: Living targets, already selected
            round_number: Current round, stamped on every log entry
            power: ATK multiplier (1.0 for basic attacks)
            ignore_defense: Skip defense mitigation
            ability_name: Set for ability uses; None means a basic attack
            aoe: Log per-target hits instead of a single target

        Returns:
            CombatResult with the action entry followed by death entries
        """
        result = CombatResult()
        if not targets:
            return result

        # Vectorized mitigation for all targets
        defenses = np.array([t.defense for t in targets], dtype=np.float64)
        raw = actor.atk * power
        if ignore_defense:
            bases = np.full(len(targets), raw, dtype=np.float64)
        else:
            bases = raw * BattleCalculator.mitigation_array(defenses)

        # Rolls stay sequential so the RNG stream follows target order
        rolls = [BattleCalculator.roll_damage(float(base), self.rng, self.constants) for base in bases]
        damages = np.array([damage for damage, _ in rolls], dtype=np.int64)
        crits = [is_crit for _, is_crit in rolls]

        current_hps = np.array([t.current_hp for t in targets], dtype=np.int64)
        new_hps = np.maximum(0, current_hps - damages)
        defeated_mask = (new_hps <= 0) & (current_hps > 0)

        for idx, target in enumerate(targets):
            target.take_damage(int(damages[idx]))
            result.damage_dealt[target.id] = int(damages[idx])

        total = int(damages.sum())
        action_type = ActionType.ABILITY if ability_name else ActionType.ATTACK

        if aoe:
            hits = tuple(
                AoeHit(target_id=t.id, target_name=t.name, damage=int(damages[i]), is_critical=crits[i])
                for i, t in enumerate(targets)
            )
            names = ", ".join(t.name for t in targets)
            action = CombatAction(
                round=round_number,
                actor_id=actor.id,
                actor_name=actor.name,
                action_type=action_type,
                hits=hits,
                damage=total,
                is_critical=any(crits),
                ability_name=ability_name,
                message=f"{actor.name} uses {ability_name or 'an attack'} hitting {names} for {total} total damage!",
            )
        else:
            target = targets[0]
            damage = int(damages[0])
            if ability_name:
                message = f"{actor.name} uses {ability_name} on {target.name} for {damage} damage"
            elif crits[0]:
                message = f"{actor.name} CRITICALLY hits {target.name} for {damage} damage!"
            else:
                message = f"{actor.name} attacks {target.name} for {damage} damage"
            action = CombatAction(
                round=round_number,
                actor_id=actor.id,
                actor_name=actor.name,
                action_type=action_type,
                target_id=target.id,
                target_name=target.name,
                damage=damage,
                is_critical=crits[0],
                ability_name=ability_name,
                message=message,
            )

        result.actions.append(action)
        self._emit_log(action.message, round_number)

        for idx in np.where(defeated_mask)[0]:
            target = targets[idx]
            result.actions.append(self.mark_defeated(target, round_number))
            result.defeated.append(target)

        return result

    def resolve_heal(
        self,
        actor: "CombatUnit",
        target: "CombatUnit",
        round_number: int,
        power: float,
        ability_name: str,
    ) -> CombatResult:
        """Heal ``target`` by ``floor(atk * power)``, clamped at max HP.

        The log records the HP actually restored.
        """
        amount = BattleCalculator.heal_amount(actor.atk, power)
        restored = target.heal(amount)
        message = f"{actor.name} heals {target.name} for {restored} HP"
        self._emit_log(message, round_number)
        return CombatResult(actions=[CombatAction(
            round=round_number,
            actor_id=actor.id,
            actor_name=actor.name,
            action_type=ActionType.HEAL,
            target_id=target.id,
            target_name=target.name,
            healing=restored,
            ability_name=ability_name,
            message=message,
        )])

    def mark_defeated(self, unit: "CombatUnit", round_number: int) -> CombatAction:
        """Flag a unit as dead and return its death entry."""
        unit.current_hp = 0
        unit.is_alive = False
        message = f"{unit.name} has been defeated!"
        self._emit_log(message, round_number)
        return CombatAction(
            round=round_number,
            actor_id=unit.id,
            actor_name=unit.name,
            action_type=ActionType.DEATH,
            message=message,
        )
