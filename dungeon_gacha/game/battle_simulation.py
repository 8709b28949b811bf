"""
Turn-based battle simulation.

The simulation is the only place CombatUnits change during a fight. It runs
a small state machine:

- Init: copy the rosters, place units on their formation grids, apply HP
  carry-over, reset per-battle bookkeeping, seed the RNG.
- TurnLoop: each round ticks cooldowns, orders the living units by SPD
  (seeded shuffle among equal SPD) and lets each of them act.
- Resolved: one side is wiped out, or the round cap was hit and the side with
  the larger summed HP ratio wins (ties go to the player).

Given the same rosters, ability lookup and seed, ``simulate`` always returns
the same action log.
"""

import time
from itertools import groupby
from typing import Callable, Mapping, Optional, Sequence

import numpy as np

from ..core.data import (
    DEFAULT_COMBAT_CONSTANTS,
    GRID_COLS,
    GRID_ROWS,
    ROLE_BASE_STATS,
    ROLE_PREFERRED_ROW,
    ActionType,
    CombatConstants,
    Position,
    Rarity,
    Role,
    StatBlock,
    Team,
)
from ..core.engine.actions import BattleResult, CombatAction
from ..core.engine.rng import SeededRNG
from ..core.events import (
    ActionResolved,
    BattleEnded,
    BattleStarted,
    LogMessage,
    RoundStarted,
    UnitDefeated,
    UnitSummoned,
)
from .combat import AbilityResolver, CombatResolver, SummonManager, TargetingResolver
from .content.content_structures import AbilityDefinition
from .entities.unit import CombatUnit


def compute_turn_order(units: Sequence[CombatUnit], rng: SeededRNG) -> list[CombatUnit]:
    """Living units by descending SPD; equal-SPD groups are shuffled by ``rng``.

    The RNG is only consulted for groups of two or more, so a roster with
    distinct speeds never draws.
    """
    ordered = sorted((u for u in units if u.is_alive), key=lambda u: -u.spd)
    result: list[CombatUnit] = []
    for _, group in groupby(ordered, key=lambda u: u.spd):
        members = list(group)
        if len(members) > 1:
            rng.shuffle(members)
        result.extend(members)
    return result


def hp_ratio_total(units: Sequence[CombatUnit]) -> float:
    """Sum of current/max HP over a side; dead units count as zero."""
    if not units:
        return 0.0
    current = np.array([u.current_hp if u.is_alive else 0 for u in units], dtype=np.float64)
    maximum = np.array([u.max_hp for u in units], dtype=np.float64)
    ratios = np.divide(current, maximum, out=np.zeros_like(current), where=maximum > 0)
    return float(ratios.sum())


def decide_winner_by_hp(players: Sequence[CombatUnit], enemies: Sequence[CombatUnit]) -> Team:
    """Turn-limit tie-break: higher summed HP ratio wins, equal goes to the player."""
    if hp_ratio_total(players) >= hp_ratio_total(enemies):
        return Team.PLAYER
    return Team.ENEMY


def assign_positions(units: list[CombatUnit]) -> tuple[list[CombatUnit], list[CombatUnit]]:
    """Place a team on its 3x3 grid.

    Explicit valid positions are honored first (first come, first served).
    Everyone else is placed by role-preferred row, stable in roster order,
    taking the first free column of that row or else the first free cell.

    Returns:
        (placed units in roster order, units dropped for lack of space)
    """
    taken: set[Position] = set()
    placed: set[int] = set()

    for index, unit in enumerate(units):
        if unit.position is not None and unit.position.is_valid() and unit.position not in taken:
            taken.add(unit.position)
            placed.add(index)

    remaining = [i for i in range(len(units)) if i not in placed]
    remaining.sort(key=lambda i: ROLE_PREFERRED_ROW.get(units[i].role, 0))

    all_cells = [Position(r, c) for r in range(GRID_ROWS) for c in range(GRID_COLS)]
    dropped_indices = set()
    for index in remaining:
        unit = units[index]
        preferred = ROLE_PREFERRED_ROW.get(unit.role, 0)
        cell = next((Position(preferred, c) for c in range(GRID_COLS)
                     if Position(preferred, c) not in taken), None)
        if cell is None:
            cell = next((p for p in all_cells if p not in taken), None)
        if cell is None:
            dropped_indices.add(index)
            continue
        unit.position = cell
        taken.add(cell)

    kept = [u for i, u in enumerate(units) if i not in dropped_indices]
    dropped = [u for i, u in enumerate(units) if i in dropped_indices]
    return kept, dropped


class BattleSimulation:
    """Deterministic auto-battle between two rosters."""

    def __init__(
        self,
        player_units: Sequence[CombatUnit],
        enemy_units: Sequence[CombatUnit],
        abilities: Mapping[str, AbilityDefinition],
        seed: Optional[int] = None,
        constants: CombatConstants = DEFAULT_COMBAT_CONSTANTS,
        hp_overrides: Optional[Mapping[str, int]] = None,
        role_stats: Mapping[Role, StatBlock] = ROLE_BASE_STATS,
        rarity_multipliers: Optional[Mapping[Rarity, float]] = None,
        event_emitter: Optional[Callable] = None,
    ):
        """Set up a battle.

        Args:
            player_units: Player roster; never mutated
            enemy_units: Enemy roster; never mutated
            abilities: Ability lookup by id, read-only
            seed: RNG seed; when None one is taken from the clock and recorded
            constants: Combat tuning
            hp_overrides: Unit id -> starting HP, for dungeon carry-over
            role_stats: Base stats for summoned units
            rarity_multipliers: Rarity table for summoned units
            event_emitter: Callable receiving engine events
        """
        self._player_source = list(player_units)
        self._enemy_source = list(enemy_units)
        self.abilities = abilities
        self.seed = seed if seed is not None else int(time.time() * 1000)
        self.constants = constants
        self.hp_overrides = dict(hp_overrides or {})
        self.role_stats = role_stats
        self.rarity_multipliers = rarity_multipliers
        self.emit_event = event_emitter or (lambda e: None)

        self.teams: dict[Team, list[CombatUnit]] = {Team.PLAYER: [], Team.ENEMY: []}
        self.action_log: list[CombatAction] = []
        self.round = 0

    def _emit_log(self, message: str, level: str = "INFO", category: str = "BATTLE") -> None:
        self.emit_event(LogMessage(turn=self.round, message=message, category=category,
                                   level=level, source="BattleSimulation"))

    def _prepare_team(self, source: list[CombatUnit], team: Team, seen_ids: set[str]) -> list[CombatUnit]:
        units = []
        for original in source:
            # Results and replays are keyed by id; the first unit to claim one keeps it
            if original.id in seen_ids:
                self._emit_log(f"{original.name} dropped: duplicate unit id '{original.id}'", "WARNING")
                continue
            seen_ids.add(original.id)
            unit = original.clone()
            unit.team = team
            unit.cooldown_remaining = 0
            unit.ability_cursor = 0
            unit.is_alive = unit.current_hp > 0

            if unit.id in self.hp_overrides:
                unit.current_hp = max(0, min(unit.max_hp, int(self.hp_overrides[unit.id])))
                unit.is_alive = unit.current_hp > 0

            unknown = [a for a in unit.ability_ids if a not in self.abilities]
            if unknown:
                self._emit_log(f"{unit.name}: unknown abilities {unknown} ignored", "WARNING")
                unit.ability_ids = [a for a in unit.ability_ids if a in self.abilities]
            units.append(unit)

        placed, dropped = assign_positions(units)
        for unit in dropped:
            self._emit_log(f"{unit.name} dropped: no free cell on the {team.name.lower()} grid", "WARNING")
        return placed

    def _initialize(self) -> None:
        self.rng = SeededRNG(self.seed)
        self.round = 0
        self.action_log = []
        seen_ids: set[str] = set()
        self.teams = {
            Team.PLAYER: self._prepare_team(self._player_source, Team.PLAYER, seen_ids),
            Team.ENEMY: self._prepare_team(self._enemy_source, Team.ENEMY, seen_ids),
        }

        self.targeting = TargetingResolver(self.rng)
        self.combat = CombatResolver(self.rng, self.constants, self.emit_event)
        self.summons = SummonManager(
            self.rng,
            self.abilities,
            constants=self.constants,
            role_stats=self.role_stats,
            rarity_multipliers=self.rarity_multipliers,
            event_emitter=self.emit_event,
        )
        self.ability_resolver = AbilityResolver(
            self.abilities,
            self.rng,
            self.targeting,
            self.combat,
            self.summons,
            constants=self.constants,
            event_emitter=self.emit_event,
        )

    def living(self, team: Team) -> list[CombatUnit]:
        return [u for u in self.teams[team] if u.is_alive]

    def all_units(self) -> list[CombatUnit]:
        return self.teams[Team.PLAYER] + self.teams[Team.ENEMY]

    def _elimination_winner(self) -> Optional[Team]:
        # A wiped player side loses even if the enemy side is empty too
        if not self.living(Team.PLAYER):
            return Team.ENEMY
        if not self.living(Team.ENEMY):
            return Team.PLAYER
        return None

    def _record(self, actions: list[CombatAction]) -> None:
        for action in actions:
            self.action_log.append(action)
            self.emit_event(ActionResolved(turn=self.round, action=action))
            if action.action_type is ActionType.DEATH:
                unit = next((u for u in self.all_units() if u.id == action.actor_id), None)
                if unit is not None:
                    self.emit_event(UnitDefeated(turn=self.round, unit_id=unit.id,
                                                 unit_name=unit.name, team=unit.team))

    def _play_round(self) -> None:
        for unit in self.all_units():
            if unit.is_alive:
                unit.tick_cooldown()

        order = compute_turn_order(self.all_units(), self.rng)
        self.emit_event(RoundStarted(turn=self.round, turn_order=tuple(u.id for u in order)))

        for actor in order:
            if not actor.is_alive:
                continue
            if self._elimination_winner() is not None:
                return

            allies = self.teams[actor.team]
            enemies = self.teams[actor.team.opponent]
            outcome = self.ability_resolver.take_turn(actor, allies, enemies, self.round)

            if outcome.summoned is not None:
                allies.append(outcome.summoned)
                self.emit_event(UnitSummoned(turn=self.round, summoner_id=actor.id,
                                             unit=outcome.summoned.snapshot()))
            self._record(outcome.actions)

    def simulate(self) -> BattleResult:
        """Run the battle to completion and return its result.

        State is rebuilt from the constructor inputs on every call.
        """
        self._initialize()
        initial_units = [u.snapshot() for u in self.all_units()]
        self.emit_event(BattleStarted(
            turn=0,
            player_ids=tuple(u.id for u in self.teams[Team.PLAYER]),
            enemy_ids=tuple(u.id for u in self.teams[Team.ENEMY]),
            seed=self.seed,
        ))

        reason = "elimination"
        winner = self._elimination_winner()
        if winner is not None:
            reason = "empty_roster"
            self._emit_log(f"Battle decided before the first round: {winner.name.lower()} wins")

        while winner is None:
            if self.round >= self.constants.max_turns:
                winner = decide_winner_by_hp(self.teams[Team.PLAYER], self.teams[Team.ENEMY])
                reason = "turn_limit"
                self._emit_log(f"Turn limit reached; {winner.name.lower()} wins on remaining HP")
                break
            self.round += 1
            self._play_round()
            winner = self._elimination_winner()

        self.emit_event(BattleEnded(turn=self.round, winner=winner, turn_count=self.round, reason=reason))

        return BattleResult(
            winner=winner,
            action_log=list(self.action_log),
            turn_count=self.round,
            seed=self.seed,
            player_survivors=[u.id for u in self.living(Team.PLAYER)],
            enemy_survivors=[u.id for u in self.living(Team.ENEMY)],
            initial_units=initial_units,
            final_hp={u.id: u.current_hp for u in self.all_units()},
            ended_by_turn_limit=reason == "turn_limit",
        )


def simulate_battle(
    player_units: Sequence[CombatUnit],
    enemy_units: Sequence[CombatUnit],
    abilities: Mapping[str, AbilityDefinition],
    seed: Optional[int] = None,
    **kwargs,
) -> BattleResult:
    """Convenience wrapper: build a BattleSimulation and run it once."""
    return BattleSimulation(player_units, enemy_units, abilities, seed=seed, **kwargs).simulate()
