"""Combat unit state for a single battle.

A CombatUnit is built fresh for every battle from a character definition or
an enemy/summon template. The battle simulation owns its copies and is the
only code that mutates them.
"""

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ...core.data import MAX_SUMMONS_LIMIT, Position, Role, StatBlock, Team
from ...core.engine.actions import UnitSnapshot

if TYPE_CHECKING:
    from ..content.content_structures import SummonTemplate


@dataclass
class SummonerConfig:
    """Which templates a summoner can call and how many may be alive at once."""
    templates: tuple["SummonTemplate", ...] = ()
    max_summons: int = 1

    def __post_init__(self):
        self.templates = tuple(self.templates)
        self.max_summons = max(1, min(MAX_SUMMONS_LIMIT, int(self.max_summons)))


@dataclass
class CombatUnit:
    """A unit taking part in a battle."""
    id: str
    name: str
    role: Role
    team: Team
    stats: StatBlock
    current_hp: int = -1
    position: Optional[Position] = None
    is_alive: bool = True
    ability_ids: list[str] = field(default_factory=list)
    is_boss: bool = False
    summoner: Optional[SummonerConfig] = None
    summoner_id: Optional[str] = None
    level: int = 1
    ascension: int = 0

    # Per-battle bookkeeping
    cooldown_remaining: int = 0
    ability_cursor: int = 0

    def __post_init__(self):
        if self.current_hp < 0:
            self.current_hp = self.stats.hp
        self.current_hp = min(self.current_hp, self.stats.hp)
        if self.current_hp == 0:
            self.is_alive = False

    @property
    def max_hp(self) -> int:
        return self.stats.hp

    @property
    def atk(self) -> int:
        return self.stats.atk

    @property
    def defense(self) -> int:
        return self.stats.defense

    @property
    def spd(self) -> int:
        return self.stats.spd

    @property
    def hp_ratio(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.current_hp / self.max_hp

    @property
    def is_summon(self) -> bool:
        return self.summoner_id is not None

    @property
    def is_summoner(self) -> bool:
        return self.summoner is not None and len(self.summoner.templates) > 0

    @property
    def ability_ready(self) -> bool:
        return self.cooldown_remaining <= 0

    def take_damage(self, amount: int) -> int:
        """Reduce HP, clamped at zero. Returns the HP actually removed.

        Death is not flagged here; the combat resolver does that so it can
        log the death entry in order.
        """
        applied = max(0, min(amount, self.current_hp))
        self.current_hp -= applied
        return applied

    def heal(self, amount: int) -> int:
        """Restore HP, clamped at max HP. Returns the HP actually restored."""
        applied = max(0, min(amount, self.max_hp - self.current_hp))
        self.current_hp += applied
        return applied

    def tick_cooldown(self) -> None:
        if self.cooldown_remaining > 0:
            self.cooldown_remaining -= 1

    def snapshot(self) -> UnitSnapshot:
        return UnitSnapshot(
            id=self.id,
            name=self.name,
            role=self.role,
            team=self.team,
            stats=self.stats,
            current_hp=self.current_hp,
            position=self.position if self.position is not None else Position(0, 0),
            is_alive=self.is_alive,
            is_boss=self.is_boss,
            summoner_id=self.summoner_id,
        )

    def clone(self) -> "CombatUnit":
        """Independent copy for a fresh battle; templates stay shared."""
        cloned = copy.copy(self)
        cloned.ability_ids = list(self.ability_ids)
        return cloned

    def __str__(self) -> str:
        return (f"{self.name} ({self.role.value}) HP:{self.current_hp}/{self.max_hp} "
                f"ATK:{self.atk} DEF:{self.defense} SPD:{self.spd}")
