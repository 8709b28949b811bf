"""
Expedition resolution from aggregate team power.

An expedition is a chain of waves. Each wave is passed with a probability
derived from the team/required power ratio and a difficulty that ramps from
1.0 on the first wave towards 1.5 on the last. The chain stops at the first
failed wave. Rewards scale with the waves cleared and the duration tier.

Three entry points:
- dispatch_expedition: validate a team and snapshot its power
- resolve_expedition: roll the waves and the gacha bonus
- preview_expedition: the same formulas in expectation, no rolls
"""

import math
from typing import Callable, Iterable, Optional

import numpy as np

from ...core.data import Role, StatBlock
from ...core.engine.rng import SeededRNG
from ...core.events import ExpeditionDispatched, ExpeditionResolved, LogMessage
from ..entities.stats import calculate_team_power
from .expedition_structures import (
    ActiveExpedition,
    DurationTier,
    ExpeditionConfig,
    ExpeditionPreview,
    ExpeditionResult,
)

# Power ratio used when a tier asks for no power at all
FULL_POWER_RATIO = 2.0
MAX_PASS_CHANCE = 0.99
PASS_CHANCE_SCALE = 0.9
DIFFICULTY_RAMP = 0.5


def power_ratio(team_power: float, required_power: float) -> float:
    if required_power <= 0:
        return FULL_POWER_RATIO
    return team_power / required_power


def wave_difficulties(total_waves: int) -> np.ndarray:
    """Difficulty of each wave, ``1 + 0.5 * i / total`` for i from 0."""
    if total_waves <= 0:
        return np.zeros(0, dtype=np.float64)
    return 1.0 + DIFFICULTY_RAMP * (np.arange(total_waves, dtype=np.float64) / total_waves)


def wave_pass_chances(ratio: float, total_waves: int) -> np.ndarray:
    """Per-wave pass probability for a given power ratio."""
    difficulties = wave_difficulties(total_waves)
    return np.minimum(MAX_PASS_CHANCE, (ratio / difficulties) * PASS_CHANCE_SCALE)


def gacha_chance(config: ExpeditionConfig, tier: DurationTier, ratio: float) -> float:
    """Bonus gacha pull chance, clamped to [0, max_gacha_chance]."""
    chance = (config.base_gacha_chance * tier.gacha_chance_multiplier
              + config.power_ratio_gacha_bonus * max(0.0, ratio - 1.0))
    return float(min(config.max_gacha_chance, max(0.0, chance)))


def wave_rewards(config: ExpeditionConfig, tier: DurationTier, waves: int) -> tuple[int, int]:
    """(xp, gold) for a number of cleared waves."""
    xp = math.floor(config.base_xp_per_wave * tier.xp_multiplier * waves)
    gold = math.floor(config.base_gold_per_wave * tier.gold_multiplier * waves)
    return xp, gold


def _emit_log(emitter: Callable, message: str, level: str = "INFO") -> None:
    emitter(LogMessage(turn=0, message=message, category="EXPEDITION",
                       level=level, source="ExpeditionResolver"))


def dispatch_expedition(
    expedition_id: str,
    team: Iterable[tuple[str, StatBlock, Optional[Role]]],
    duration_hours: int,
    config: ExpeditionConfig,
    now_ms: int,
    event_emitter: Optional[Callable] = None,
) -> ActiveExpedition:
    """Send a team out and snapshot its power.

    Args:
        expedition_id: Caller-chosen id for the expedition
        team: (character id, stats, role) per member
        duration_hours: One of the configured tier durations
        config: Expedition tuning
        now_ms: Caller's clock in milliseconds

    Raises:
        ValueError: If the team is empty, too large, or the duration is unknown
    """
    emit = event_emitter or (lambda e: None)
    members = list(team)
    if not members:
        raise ValueError("An expedition needs at least one character")
    if len(members) > config.max_team_size:
        raise ValueError(
            f"Team of {len(members)} exceeds the maximum of {config.max_team_size}"
        )
    ids = [character_id for character_id, _, _ in members]
    if len(set(ids)) != len(ids):
        raise ValueError("A character cannot join the same expedition twice")

    tier = config.get_tier(duration_hours)
    if tier is None:
        raise ValueError(
            f"Unknown expedition duration {duration_hours}h; expected one of {config.durations}"
        )

    team_power = calculate_team_power((stats, role) for _, stats, role in members)
    expedition = ActiveExpedition(
        id=expedition_id,
        team_character_ids=tuple(ids),
        duration_hours=duration_hours,
        started_at=now_ms,
        completes_at=now_ms + tier.duration_ms,
        team_power=team_power,
    )
    emit(ExpeditionDispatched(turn=0, expedition_id=expedition_id,
                              team_character_ids=expedition.team_character_ids,
                              duration_hours=duration_hours, team_power=team_power))
    _emit_log(emit, f"Expedition {expedition_id} dispatched for {duration_hours}h "
                    f"with power {team_power}")
    return expedition


def resolve_expedition(
    expedition: ActiveExpedition,
    config: ExpeditionConfig,
    rng: Optional[SeededRNG] = None,
    event_emitter: Optional[Callable] = None,
) -> ExpeditionResult:
    """Roll an expedition's waves and rewards.

    Never raises: an unknown duration yields an empty result and a warning.
    Without an explicit RNG the expedition's start time seeds one, so a given
    expedition always resolves the same way.
    """
    emit = event_emitter or (lambda e: None)
    rng = rng or SeededRNG(expedition.started_at)

    tier = config.get_tier(expedition.duration_hours)
    if tier is None:
        _emit_log(emit, f"Expedition {expedition.id}: no tier for {expedition.duration_hours}h",
                  "WARNING")
        result = ExpeditionResult(
            waves_cleared=0,
            total_waves=0,
            full_clear=False,
            xp_earned=0,
            gold_earned=0,
            gacha_pull_won=False,
            gacha_chance=0.0,
        )
        emit(ExpeditionResolved(turn=0, expedition_id=expedition.id, result=result))
        return result

    ratio = power_ratio(expedition.team_power, tier.required_power)
    pass_chances = wave_pass_chances(ratio, tier.total_waves)

    waves_cleared = 0
    full_clear = True
    for chance in pass_chances:
        if not rng.chance(float(chance)):
            full_clear = False
            break
        waves_cleared += 1

    xp, gold = wave_rewards(config, tier, waves_cleared)
    chance = gacha_chance(config, tier, ratio)
    won = rng.chance(chance)

    result = ExpeditionResult(
        waves_cleared=waves_cleared,
        total_waves=tier.total_waves,
        full_clear=full_clear,
        xp_earned=xp,
        gold_earned=gold,
        gacha_pull_won=won,
        gacha_chance=chance,
    )
    _emit_log(emit, f"Expedition {expedition.id}: {waves_cleared}/{tier.total_waves} waves, "
                    f"{xp} XP, {gold} gold" + (", gacha pull won" if won else ""))
    emit(ExpeditionResolved(turn=0, expedition_id=expedition.id, result=result))
    return result


def preview_expedition(
    team_power: float,
    duration_hours: int,
    config: ExpeditionConfig,
) -> Optional[ExpeditionPreview]:
    """Expected outcome of sending ``team_power`` on a tier, None for unknown tiers.

    Expected waves cleared is the sum over waves of the probability of
    reaching and passing that wave, i.e. the sum of the cumulative products
    of the pass chances.
    """
    tier = config.get_tier(duration_hours)
    if tier is None:
        return None

    ratio = power_ratio(team_power, tier.required_power)
    pass_chances = wave_pass_chances(ratio, tier.total_waves)
    survival = np.cumprod(pass_chances)
    expected_waves = float(survival.sum())
    clear_chance = float(survival[-1]) if survival.size else 1.0
    estimated_waves = math.floor(expected_waves + 0.5)
    xp, gold = wave_rewards(config, tier, estimated_waves)

    return ExpeditionPreview(
        power_ratio=ratio,
        expected_waves=expected_waves,
        estimated_waves=estimated_waves,
        total_waves=tier.total_waves,
        clear_chance=clear_chance,
        estimated_xp=xp,
        estimated_gold=gold,
        gacha_chance=gacha_chance(config, tier, ratio),
        enemy_power=tier.required_power * tier.enemy_power_mult,
    )
