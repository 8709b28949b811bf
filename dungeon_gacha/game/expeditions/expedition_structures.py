"""Data structures for timed expeditions.

Expeditions are resolved from aggregate team power rather than a per-unit
battle. The config and tiers are admin-tuned and read-only to the resolver;
an ActiveExpedition is the snapshot taken when a team is dispatched.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

HOUR_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class DurationTier:
    """Tuning for one expedition length."""

    duration_hours: int
    total_waves: int
    required_power: float
    xp_multiplier: float = 1.0
    gold_multiplier: float = 1.0
    enemy_power_mult: float = 1.0
    gacha_chance_multiplier: float = 1.0

    @property
    def duration_ms(self) -> int:
        return self.duration_hours * HOUR_MS

    @classmethod
    def from_dict(cls, hours: int, data: dict[str, Any]) -> "DurationTier":
        return cls(
            duration_hours=int(hours),
            total_waves=max(0, int(data.get("total_waves", 0))),
            required_power=float(data.get("required_power", 0)),
            xp_multiplier=float(data.get("xp_multiplier", 1.0)),
            gold_multiplier=float(data.get("gold_multiplier", 1.0)),
            enemy_power_mult=float(data.get("enemy_power_mult", 1.0)),
            gacha_chance_multiplier=float(data.get("gacha_chance_multiplier", 1.0)),
        )


def _default_tiers() -> dict[int, DurationTier]:
    return {
        1: DurationTier(1, total_waves=3, required_power=2000, xp_multiplier=1.0,
                        gold_multiplier=1.0, enemy_power_mult=1.0, gacha_chance_multiplier=1.0),
        4: DurationTier(4, total_waves=6, required_power=4000, xp_multiplier=2.5,
                        gold_multiplier=2.5, enemy_power_mult=1.5, gacha_chance_multiplier=2.0),
        8: DurationTier(8, total_waves=10, required_power=7000, xp_multiplier=4.5,
                        gold_multiplier=4.5, enemy_power_mult=2.0, gacha_chance_multiplier=3.0),
        12: DurationTier(12, total_waves=15, required_power=10000, xp_multiplier=7.0,
                         gold_multiplier=7.0, enemy_power_mult=2.5, gacha_chance_multiplier=4.0),
    }


@dataclass(frozen=True)
class ExpeditionConfig:
    """Admin-tunable expedition parameters."""

    max_team_size: int = 4
    base_xp_per_wave: float = 10
    base_gold_per_wave: float = 5
    base_gacha_chance: float = 0.05
    power_ratio_gacha_bonus: float = 0.05
    max_gacha_chance: float = 0.5
    duration_tiers: dict[int, DurationTier] = field(default_factory=_default_tiers)

    def get_tier(self, duration_hours: int) -> Optional[DurationTier]:
        return self.duration_tiers.get(duration_hours)

    @property
    def durations(self) -> list[int]:
        return sorted(self.duration_tiers)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ExpeditionConfig":
        if not data:
            return cls()
        defaults = cls()
        tiers_data = data.get("duration_tiers")
        tiers = (
            {int(h): DurationTier.from_dict(int(h), t) for h, t in tiers_data.items()}
            if tiers_data else _default_tiers()
        )
        return cls(
            max_team_size=int(data.get("max_team_size", defaults.max_team_size)),
            base_xp_per_wave=float(data.get("base_xp_per_wave", defaults.base_xp_per_wave)),
            base_gold_per_wave=float(data.get("base_gold_per_wave", defaults.base_gold_per_wave)),
            base_gacha_chance=float(data.get("base_gacha_chance", defaults.base_gacha_chance)),
            power_ratio_gacha_bonus=float(
                data.get("power_ratio_gacha_bonus", defaults.power_ratio_gacha_bonus)
            ),
            max_gacha_chance=float(data.get("max_gacha_chance", defaults.max_gacha_chance)),
            duration_tiers=tiers,
        )


@dataclass(frozen=True)
class ActiveExpedition:
    """A dispatched team; consumed once by the resolver."""

    id: str
    team_character_ids: tuple[str, ...]
    duration_hours: int
    started_at: int
    completes_at: int
    team_power: int

    def is_complete(self, now_ms: int) -> bool:
        return now_ms >= self.completes_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "team_character_ids": list(self.team_character_ids),
            "duration_hours": self.duration_hours,
            "started_at": self.started_at,
            "completes_at": self.completes_at,
            "team_power": self.team_power,
        }


@dataclass(frozen=True)
class ExpeditionResult:
    waves_cleared: int
    total_waves: int
    full_clear: bool
    xp_earned: int
    gold_earned: int
    gacha_pull_won: bool
    gacha_chance: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "waves_cleared": self.waves_cleared,
            "total_waves": self.total_waves,
            "full_clear": self.full_clear,
            "xp_earned": self.xp_earned,
            "gold_earned": self.gold_earned,
            "gacha_pull_won": self.gacha_pull_won,
            "gacha_chance": self.gacha_chance,
        }


@dataclass(frozen=True)
class ExpeditionPreview:
    """Expected outcome shown before a team is committed."""

    power_ratio: float
    expected_waves: float
    estimated_waves: int
    total_waves: int
    clear_chance: float
    estimated_xp: int
    estimated_gold: int
    gacha_chance: float
    enemy_power: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "power_ratio": self.power_ratio,
            "expected_waves": self.expected_waves,
            "estimated_waves": self.estimated_waves,
            "total_waves": self.total_waves,
            "clear_chance": self.clear_chance,
            "estimated_xp": self.estimated_xp,
            "estimated_gold": self.estimated_gold,
            "gacha_chance": self.gacha_chance,
            "enemy_power": self.enemy_power,
        }
