"""Summon tracking and placement.

Each summoner may keep a limited number of summoned units alive at once.
Dead summons free their slot (and their grid cell) immediately. New summons
go into the first free cell of the summoner's formation grid, scanning rows
front to back and columns left to right.
"""

from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ...core.data import (
    DEFAULT_COMBAT_CONSTANTS,
    GRID_COLS,
    GRID_ROWS,
    ROLE_BASE_STATS,
    ActionType,
    CombatConstants,
    Position,
    Rarity,
    Role,
    StatBlock,
)
from ...core.engine.actions import CombatAction
from ...core.engine.rng import SeededRNG
from ...core.events import LogMessage
from ..entities.unit_templates import create_summon_unit

if TYPE_CHECKING:
    from ..entities.unit import CombatUnit


def occupancy_grid(units: Sequence["CombatUnit"]) -> NDArray[np.bool_]:
    """3x3 mask of cells held by living units."""
    grid = np.zeros((GRID_ROWS, GRID_COLS), dtype=np.bool_)
    for unit in units:
        if unit.is_alive and unit.position is not None and unit.position.is_valid():
            grid[unit.position.row, unit.position.col] = True
    return grid


def first_free_cell(units: Sequence["CombatUnit"]) -> Optional[Position]:
    free = np.argwhere(~occupancy_grid(units))
    if len(free) == 0:
        return None
    row, col = free[0]
    return Position(int(row), int(col))


class SummonManager:
    """Creates summoned units and enforces per-summoner caps."""

    def __init__(
        self,
        rng: SeededRNG,
        known_abilities: Mapping[str, object],
        constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
        role_stats: Mapping[Role, StatBlock] = ROLE_BASE_STATS,
        rarity_multipliers: Optional[Mapping[Rarity, float]] = None,
        event_emitter: Optional[Callable] = None,
    ):
        self.rng = rng
        self.known_abilities = known_abilities
        self.constants = constants
        self.role_stats = role_stats
        self.rarity_multipliers = rarity_multipliers
        self.emit_event = event_emitter or (lambda e: None)

        self._active: dict[str, list["CombatUnit"]] = defaultdict(list)
        self._summon_counts: dict[str, int] = defaultdict(int)

    def active_summons(self, summoner: "CombatUnit") -> list["CombatUnit"]:
        """Living summons of ``summoner``; dead ones are released here."""
        alive = [u for u in self._active[summoner.id] if u.is_alive]
        self._active[summoner.id] = alive
        return list(alive)

    def has_capacity(self, summoner: "CombatUnit") -> bool:
        if not summoner.is_summoner:
            return False
        return len(self.active_summons(summoner)) < summoner.summoner.max_summons

    def can_summon(self, summoner: "CombatUnit", allies: Sequence["CombatUnit"]) -> bool:
        """Capacity left and somewhere to stand."""
        return self.has_capacity(summoner) and first_free_cell(allies) is not None

    def summon(
        self,
        summoner: "CombatUnit",
        allies: Sequence["CombatUnit"],
        round_number: int,
        ability_name: str = "Summon",
    ) -> Optional[tuple["CombatUnit", CombatAction]]:
        """Bring a new unit into battle next to ``summoner``.

        Returns:
            The new unit and its summon log entry, or None when the summoner
            has no capacity or no free cell
        """
        if not self.has_capacity(summoner):
            return None
        position = first_free_cell(allies)
        if position is None:
            return None

        templates = summoner.summoner.templates
        template = templates[0] if len(templates) == 1 else self.rng.pick(templates)

        self._summon_counts[summoner.id] += 1
        unit_id = f"{summoner.id}_{template.id}_s{self._summon_counts[summoner.id]}"
        unit = create_summon_unit(
            template,
            summoner,
            unit_id,
            self.known_abilities,
            constants=self.constants,
            role_stats=self.role_stats,
            rarity_multipliers=self.rarity_multipliers,
        )
        unit.position = position
        self._active[summoner.id].append(unit)

        message = f"{summoner.name} summons {unit.name}!"
        self.emit_event(LogMessage(turn=round_number, message=message, category="SUMMON",
                                   source="SummonManager"))
        action = CombatAction(
            round=round_number,
            actor_id=summoner.id,
            actor_name=summoner.name,
            action_type=ActionType.SUMMON,
            ability_name=ability_name,
            message=message,
            summoned_unit=unit.snapshot(),
        )
        return unit, action
