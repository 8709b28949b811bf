"""Role-driven combat behavior.

This package contains the strategy table that decides how each role picks
basic-attack targets and when its triggered ability is used.
"""

from .ai_behaviors import (
    ROLE_BEHAVIORS,
    HealerBehavior,
    RoleBehavior,
    StrikerBehavior,
    SummonerBehavior,
    TurnContext,
    create_role_behavior,
)

__all__ = [
    "ROLE_BEHAVIORS",
    "HealerBehavior",
    "RoleBehavior",
    "StrikerBehavior",
    "SummonerBehavior",
    "TurnContext",
    "create_role_behavior",
]
