"""Combat units and the stat model.

- stats.py: derived stats and power aggregation
- unit.py: CombatUnit, the per-battle unit state
- unit_templates.py: factories from content definitions to CombatUnits
"""

from .stats import calculate_character_power, calculate_team_power, compute_stats
from .unit import CombatUnit, SummonerConfig
from .unit_templates import (
    build_summoner_config,
    create_character_unit,
    create_enemy_unit,
    create_summon_unit,
    resolve_ability_ids,
)

__all__ = [
    "compute_stats",
    "calculate_character_power",
    "calculate_team_power",
    "CombatUnit",
    "SummonerConfig",
    "build_summoner_config",
    "create_character_unit",
    "create_enemy_unit",
    "create_summon_unit",
    "resolve_ability_ids",
]
