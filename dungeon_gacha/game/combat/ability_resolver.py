"""Per-turn action decision and execution.

For the acting unit the resolver:
1. picks its current ability (round-robin over its ability list) if the
   unit is off cooldown,
2. rolls the ability trigger chance,
3. asks the role behavior whether the ability is worth using,
4. resolves the ability through targeting, combat or summon code,
5. falls back to a basic attack whenever any step comes up empty.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Sequence

from ...core.data import DEFAULT_COMBAT_CONSTANTS, CombatConstants, TargetingMode
from ...core.engine.actions import CombatAction
from ...core.engine.rng import SeededRNG
from ...core.events import LogMessage
from ..ai.ai_behaviors import RoleBehavior, TurnContext, create_role_behavior
from .combat_resolver import CombatResolver
from .summon_manager import SummonManager
from .targeting import TargetingResolver

if TYPE_CHECKING:
    from ..content.content_structures import AbilityDefinition
    from ..entities.unit import CombatUnit

AOE_MODES = (TargetingMode.AOE_FIRST_N, TargetingMode.AOE_RANDOM_N)


@dataclass
class TurnOutcome:
    """Everything one unit's turn added to the battle."""
    actions: list[CombatAction] = field(default_factory=list)
    summoned: Optional["CombatUnit"] = None
    used_ability: Optional["AbilityDefinition"] = None


class AbilityResolver:
    """Decides between ability and basic attack and carries it out."""

    def __init__(
        self,
        abilities: Mapping[str, "AbilityDefinition"],
        rng: SeededRNG,
        targeting: TargetingResolver,
        combat: CombatResolver,
        summons: SummonManager,
        constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
        event_emitter: Optional[Callable] = None,
    ):
        self.abilities = abilities
        self.rng = rng
        self.targeting = targeting
        self.combat = combat
        self.summons = summons
        self.constants = constants
        self.emit_event = event_emitter or (lambda e: None)

    def current_ability(self, unit: "CombatUnit") -> Optional["AbilityDefinition"]:
        """The ability the unit would use next, ignoring cooldown.

        Units with several abilities (bosses) rotate through them in list
        order, advancing one step per use.
        """
        known = [a for a in unit.ability_ids if a in self.abilities]
        if not known:
            return None
        return self.abilities[known[unit.ability_cursor % len(known)]]

    def take_turn(
        self,
        actor: "CombatUnit",
        allies: Sequence["CombatUnit"],
        enemies: Sequence["CombatUnit"],
        round_number: int,
    ) -> TurnOutcome:
        behavior = create_role_behavior(actor.role)
        context = TurnContext(actor, allies, enemies, self.targeting, self.summons)

        ability = self.current_ability(actor) if actor.ability_ready else None
        if ability is not None and self.rng.chance(self.constants.ability_trigger_chance):
            if behavior.ability_eligible(context, ability):
                outcome = self._use_ability(context, ability, round_number)
                if outcome is not None:
                    self._start_cooldown(actor, ability)
                    return outcome
            self._log_decision(
                f"{actor.name} ({behavior.get_behavior_name()}) could not use {ability.name}, "
                "basic attack instead",
                round_number,
            )

        return self._basic_attack(context, behavior, round_number)

    def _use_ability(
        self,
        context: TurnContext,
        ability: "AbilityDefinition",
        round_number: int,
    ) -> Optional[TurnOutcome]:
        actor = context.actor

        if ability.is_summon:
            summoned = self.summons.summon(actor, context.allies, round_number, ability.name)
            if summoned is None:
                return None
            unit, action = summoned
            return TurnOutcome(actions=[action], summoned=unit, used_ability=ability)

        if ability.is_heal:
            target = context.heal_target(ability)
            if target is None:
                return None
            result = self.combat.resolve_heal(actor, target, round_number,
                                              ability.power_multiplier, ability.name)
            return TurnOutcome(actions=result.actions, used_ability=ability)

        targets = self.targeting.select_targets(
            ability.targeting, actor, context.allies, context.enemies, count=ability.target_count
        )
        if not targets:
            return None
        result = self.combat.resolve_attack(
            actor,
            targets,
            round_number,
            power=ability.power_multiplier,
            ignore_defense=ability.ignore_defense,
            ability_name=ability.name,
            aoe=ability.targeting in AOE_MODES,
        )
        return TurnOutcome(actions=result.actions, used_ability=ability)

    def _basic_attack(self, context: TurnContext, behavior: RoleBehavior, round_number: int) -> TurnOutcome:
        targets = behavior.basic_targets(context)
        if not targets:
            return TurnOutcome()
        result = self.combat.resolve_attack(context.actor, targets, round_number)
        return TurnOutcome(actions=result.actions)

    @staticmethod
    def _start_cooldown(actor: "CombatUnit", ability: "AbilityDefinition") -> None:
        actor.cooldown_remaining = ability.cooldown
        actor.ability_cursor += 1

    def _log_decision(self, message: str, turn: int) -> None:
        self.emit_event(LogMessage(turn=turn, message=message, category="AI", level="DEBUG",
                                   source="AbilityResolver"))
