"""
Dungeon runs: a sequence of room battles with HP carried between rooms.

Rooms are fought in room-number order. Each room's enemies are built from
their templates with the room's difficulty multiplier, and the battle for
room ``i`` is seeded with ``seed + i`` so a whole run is reproducible from one
seed. Survivors keep their remaining HP into the next room; fallen party
members stay down. The run ends at the first lost room.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ..core.data import Team
from ..core.engine.actions import BattleResult
from ..core.events import LogMessage
from .battle_simulation import BattleSimulation
from .content.content_catalog import ContentCatalog
from .content.content_structures import Dungeon, DungeonRoom
from .entities.unit import CombatUnit
from .entities.unit_templates import create_enemy_unit


@dataclass
class RoomResult:
    """Outcome of a single dungeon room."""
    room_id: str
    room_name: str
    room_number: int
    battle: BattleResult
    xp_awarded: int = 0

    @property
    def cleared(self) -> bool:
        return self.battle.player_won

    def to_dict(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "room_name": self.room_name,
            "room_number": self.room_number,
            "cleared": self.cleared,
            "xp_awarded": self.xp_awarded,
            "battle": self.battle.to_dict(),
        }


@dataclass
class DungeonRunResult:
    """Outcome of a full dungeon attempt."""
    dungeon_id: str
    seed: int
    rooms: list[RoomResult] = field(default_factory=list)
    final_hp: dict[str, int] = field(default_factory=dict)
    cleared: bool = False

    @property
    def rooms_cleared(self) -> int:
        return sum(1 for room in self.rooms if room.cleared)

    @property
    def total_xp(self) -> int:
        return sum(room.xp_awarded for room in self.rooms)

    @property
    def survivors(self) -> list[str]:
        return [unit_id for unit_id, hp in self.final_hp.items() if hp > 0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "dungeon_id": self.dungeon_id,
            "seed": self.seed,
            "cleared": self.cleared,
            "rooms_cleared": self.rooms_cleared,
            "total_xp": self.total_xp,
            "final_hp": dict(self.final_hp),
            "rooms": [room.to_dict() for room in self.rooms],
        }


class DungeonRunner:
    """Plays a dungeon room by room with one party."""

    def __init__(self, catalog: ContentCatalog, event_emitter: Optional[Callable] = None):
        self.catalog = catalog
        self.emit_event = event_emitter or (lambda e: None)

    def _emit_log(self, message: str, level: str = "INFO") -> None:
        self.emit_event(LogMessage(turn=0, message=message, category="DUNGEON",
                                   level=level, source="DungeonRunner"))

    def build_room_enemies(self, room: DungeonRoom) -> list[CombatUnit]:
        """Enemy units for a room; unknown template ids are skipped with a warning.

        Units get ids of the form ``<template>_<n>`` so repeated templates in
        one room stay distinct.
        """
        enemies = []
        for index, placement in enumerate(room.enemies):
            template = self.catalog.enemies.get(placement.enemy_template_id)
            if template is None:
                self._emit_log(
                    f"Room {room.id}: unknown enemy template '{placement.enemy_template_id}' skipped",
                    "WARNING",
                )
                continue
            unit = create_enemy_unit(
                self.catalog,
                template,
                difficulty_mult=room.difficulty_mult,
                team=Team.ENEMY,
                unit_id=f"{template.id}_{index + 1}",
                event_emitter=self.emit_event,
            )
            unit.position = placement.position
            enemies.append(unit)
        return enemies

    def run(self, dungeon: Dungeon, team: Sequence[CombatUnit], seed: int) -> DungeonRunResult:
        """Fight through ``dungeon`` with ``team``.

        Raises:
            ValueError: If the team is empty or larger than the dungeon allows
        """
        if not team:
            raise ValueError("A dungeon run needs at least one character")
        if len(team) > dungeon.max_team_size:
            raise ValueError(
                f"Team of {len(team)} exceeds {dungeon.name}'s limit of {dungeon.max_team_size}"
            )

        result = DungeonRunResult(dungeon_id=dungeon.id, seed=seed)
        party_ids = {unit.id for unit in team}
        hp_overrides: dict[str, int] = {}

        self._emit_log(f"Entering {dungeon.name} with {len(team)} characters (seed {seed})")

        for room_index, room in enumerate(dungeon.rooms):
            simulation = BattleSimulation(
                team,
                self.build_room_enemies(room),
                self.catalog.abilities,
                seed=seed + room_index,
                constants=self.catalog.combat,
                hp_overrides=hp_overrides,
                role_stats=self.catalog.role_stats,
                rarity_multipliers=self.catalog.rarity_multipliers,
                event_emitter=self.emit_event,
            )
            battle = simulation.simulate()

            # Carry over HP of the party only; summons vanish between rooms
            hp_overrides = {
                unit_id: hp for unit_id, hp in battle.final_hp.items() if unit_id in party_ids
            }
            room_result = RoomResult(
                room_id=room.id,
                room_name=room.name,
                room_number=room.room_number,
                battle=battle,
                xp_awarded=room.xp_reward if battle.player_won else 0,
            )
            result.rooms.append(room_result)

            if not battle.player_won:
                self._emit_log(f"Party defeated in {room.name} (room {room.room_number})")
                break
            self._emit_log(f"Cleared {room.name} in {battle.turn_count} rounds, +{room.xp_reward} XP")

        result.final_hp = hp_overrides or {unit.id: unit.current_hp for unit in team}
        result.cleared = len(result.rooms) == len(dungeon.rooms) and all(r.cleared for r in result.rooms)
        if result.cleared:
            self._emit_log(f"{dungeon.name} cleared!")
        return result
