"""Timed expeditions resolved from team power."""

from .expedition_resolver import (
    FULL_POWER_RATIO,
    dispatch_expedition,
    gacha_chance,
    power_ratio,
    preview_expedition,
    resolve_expedition,
    wave_difficulties,
    wave_pass_chances,
    wave_rewards,
)
from .expedition_structures import (
    HOUR_MS,
    ActiveExpedition,
    DurationTier,
    ExpeditionConfig,
    ExpeditionPreview,
    ExpeditionResult,
)

__all__ = [
    "FULL_POWER_RATIO",
    "HOUR_MS",
    "ActiveExpedition",
    "DurationTier",
    "ExpeditionConfig",
    "ExpeditionPreview",
    "ExpeditionResult",
    "dispatch_expedition",
    "gacha_chance",
    "power_ratio",
    "preview_expedition",
    "resolve_expedition",
    "wave_difficulties",
    "wave_pass_chances",
    "wave_rewards",
]
