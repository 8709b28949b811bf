"""Role Behavior Strategy Classes

This module implements the Strategy design pattern for role behavior. Each
role maps to a behavior that knows two things: how its basic attack picks a
target, and whether a triggered ability is worth using right now.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from ...core.data import Role, TargetingMode

if TYPE_CHECKING:
    from ..combat.summon_manager import SummonManager
    from ..combat.targeting import TargetingResolver
    from ..content.content_structures import AbilityDefinition
    from ..entities.unit import CombatUnit


@dataclass
class TurnContext:
    """What a behavior can see when the acting unit takes its turn."""
    actor: "CombatUnit"
    allies: Sequence["CombatUnit"]
    enemies: Sequence["CombatUnit"]
    targeting: "TargetingResolver"
    summons: "SummonManager"

    def heal_target(self, ability: "AbilityDefinition") -> Optional["CombatUnit"]:
        return self.targeting.lowest_hp_ally(self.allies, ability.heal_threshold)


class RoleBehavior(ABC):
    """Abstract base class for role behavior strategies."""

    basic_targeting: TargetingMode = TargetingMode.SINGLE_CLOSEST

    def basic_targets(self, context: TurnContext) -> list["CombatUnit"]:
        """Target for a basic attack; empty when no enemy is left."""
        return context.targeting.select_targets(
            self.basic_targeting, context.actor, context.allies, context.enemies
        )

    @abstractmethod
    def ability_eligible(self, context: TurnContext, ability: "AbilityDefinition") -> bool:
        """Whether a triggered ability should be used instead of a basic attack."""
        pass

    @abstractmethod
    def get_behavior_name(self) -> str:
        pass


class StrikerBehavior(RoleBehavior):
    """Damage roles: any triggered ability is used; targeting may still fall back."""

    def __init__(self, basic_targeting: TargetingMode, name: str):
        self.basic_targeting = basic_targeting
        self._name = name

    def ability_eligible(self, context: TurnContext, ability: "AbilityDefinition") -> bool:
        return True

    def get_behavior_name(self) -> str:
        return self._name


class HealerBehavior(RoleBehavior):
    """Heals only when an ally is below the ability's threshold."""

    basic_targeting = TargetingMode.SINGLE_LOWEST_HP

    def ability_eligible(self, context: TurnContext, ability: "AbilityDefinition") -> bool:
        if not ability.is_heal:
            return True
        return context.heal_target(ability) is not None

    def get_behavior_name(self) -> str:
        return "Healer"


class SummonerBehavior(RoleBehavior):
    """Summons only while below its cap and with a free cell."""

    basic_targeting = TargetingMode.SINGLE_LOWEST_HP

    def ability_eligible(self, context: TurnContext, ability: "AbilityDefinition") -> bool:
        if not ability.is_summon:
            return True
        return context.summons.can_summon(context.actor, context.allies)

    def get_behavior_name(self) -> str:
        return "Summoner"


ROLE_BEHAVIORS: dict[Role, RoleBehavior] = {
    Role.TANK: StrikerBehavior(TargetingMode.SINGLE_CLOSEST, "Frontline"),
    Role.WARRIOR: StrikerBehavior(TargetingMode.SINGLE_CLOSEST, "Frontline"),
    Role.ARCHER: StrikerBehavior(TargetingMode.SINGLE_LOWEST_HP, "Ranged"),
    Role.MAGE: StrikerBehavior(TargetingMode.SINGLE_LOWEST_HP, "Caster"),
    Role.ASSASSIN: StrikerBehavior(TargetingMode.SINGLE_BACK_ROW, "Assassin"),
    Role.HEALER: HealerBehavior(),
    Role.SUMMONER: SummonerBehavior(),
}


def create_role_behavior(role: Role) -> RoleBehavior:
    """Look up the behavior strategy for a role.

    Raises:
        KeyError: If the role has no registered behavior
    """
    if role not in ROLE_BEHAVIORS:
        raise KeyError(f"No behavior registered for role: {role}")
    return ROLE_BEHAVIORS[role]
