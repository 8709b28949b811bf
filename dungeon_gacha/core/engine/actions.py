"""Battle action log records.

A battle produces an ordered list of CombatAction entries. Together with the
initial unit snapshots stored on the BattleResult, the log is enough to
rebuild every unit's HP and alive state at any point of the fight.

Action Types:
- attack: basic attack against one target
- ability: ability use, single target or a list of AoE hits
- heal: healing applied to one ally
- summon: a new unit entered the battle (carries its snapshot)
- death: a unit reached 0 HP
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..data import ActionType, Position, Role, StatBlock, Team


@dataclass(frozen=True)
class UnitSnapshot:
    """Frozen view of a combat unit, used for replay and summons."""
    id: str
    name: str
    role: Role
    team: Team
    stats: StatBlock
    current_hp: int
    position: Position
    is_alive: bool = True
    is_boss: bool = False
    summoner_id: Optional[str] = None

    @property
    def max_hp(self) -> int:
        return self.stats.hp

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "team": self.team.name.lower(),
            "stats": self.stats.to_dict(),
            "current_hp": self.current_hp,
            "position": self.position.to_dict(),
            "is_alive": self.is_alive,
            "is_boss": self.is_boss,
            "summoner_id": self.summoner_id,
        }


@dataclass(frozen=True)
class AoeHit:
    """Damage dealt to one target of an area ability."""
    target_id: str
    target_name: str
    damage: int
    is_critical: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.target_id,
            "name": self.target_name,
            "damage": self.damage,
            "is_critical": self.is_critical,
        }


@dataclass(frozen=True)
class CombatAction:
    """One entry in the battle action log."""
    round: int
    actor_id: str
    actor_name: str
    action_type: ActionType
    target_id: Optional[str] = None
    target_name: Optional[str] = None
    hits: tuple[AoeHit, ...] = ()
    damage: int = 0
    healing: int = 0
    is_critical: bool = False
    ability_name: Optional[str] = None
    message: str = ""
    summoned_unit: Optional[UnitSnapshot] = None

    @property
    def is_aoe(self) -> bool:
        return len(self.hits) > 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "round": self.round,
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "type": self.action_type.value,
            "damage": self.damage,
            "healing": self.healing,
            "is_critical": self.is_critical,
            "message": self.message,
        }
        if self.target_id is not None:
            data["target_id"] = self.target_id
            data["target_name"] = self.target_name
        if self.hits:
            data["targets"] = [hit.to_dict() for hit in self.hits]
        if self.ability_name is not None:
            data["ability_name"] = self.ability_name
        if self.summoned_unit is not None:
            data["summoned_unit"] = self.summoned_unit.to_dict()
        return data


@dataclass
class BattleResult:
    """Outcome of a simulated battle."""
    winner: Team
    action_log: list[CombatAction]
    turn_count: int
    seed: Optional[int] = None
    player_survivors: list[str] = field(default_factory=list)
    enemy_survivors: list[str] = field(default_factory=list)
    initial_units: list[UnitSnapshot] = field(default_factory=list)
    final_hp: dict[str, int] = field(default_factory=dict)
    ended_by_turn_limit: bool = False

    @property
    def player_won(self) -> bool:
        return self.winner is Team.PLAYER

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.name.lower(),
            "turn_count": self.turn_count,
            "seed": self.seed,
            "ended_by_turn_limit": self.ended_by_turn_limit,
            "player_survivors": list(self.player_survivors),
            "enemy_survivors": list(self.enemy_survivors),
            "initial_units": [unit.to_dict() for unit in self.initial_units],
            "final_hp": dict(self.final_hp),
            "action_log": [action.to_dict() for action in self.action_log],
        }
