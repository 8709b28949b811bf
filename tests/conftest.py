"""
Pytest configuration and shared fixtures for the engine test suite.

This module provides fixtures for the content catalog, seeded RNGs, event
buses and small hand-built rosters that are used across many test modules.
"""

from unittest.mock import Mock

import pytest

from dungeon_gacha.core.data import CombatConstants, Position, Role, Team, TargetingMode
from dungeon_gacha.core.engine.rng import SeededRNG
from dungeon_gacha.core.events import EventManager
from dungeon_gacha.game.content import AbilityDefinition, ContentCatalog, ContentLoader
from dungeon_gacha.game.entities.unit import CombatUnit
from tests.test_utils import make_unit


@pytest.fixture
def rng():
    """Seeded RNG with a fixed seed."""
    return SeededRNG(1234)


@pytest.fixture
def event_manager():
    """Fresh event manager, shut down after the test."""
    manager = EventManager()
    yield manager
    manager.shutdown()


@pytest.fixture
def event_spy():
    """Mock usable as an ``event_emitter``; inspect ``call_args_list``."""
    return Mock()


@pytest.fixture(scope="session")
def catalog() -> ContentCatalog:
    """The bundled content document, loaded once per session."""
    return ContentLoader.load_default()


@pytest.fixture
def abilities():
    """A small ability table covering every targeting family."""
    return {
        "strike": AbilityDefinition(
            id="strike", name="Strike", targeting=TargetingMode.SINGLE_CLOSEST, power_multiplier=1.5
        ),
        "sweep": AbilityDefinition(
            id="sweep", name="Sweep", targeting=TargetingMode.AOE_FIRST_N,
            power_multiplier=0.5, target_count=3,
        ),
        "mend": AbilityDefinition(
            id="mend", name="Mend", targeting=TargetingMode.HEAL_LOWEST_ALLY,
            power_multiplier=2.0, heal_threshold=0.7,
        ),
        "call": AbilityDefinition(id="call", name="Call", targeting=TargetingMode.SUMMON_UNIT),
    }


@pytest.fixture
def no_ability_constants():
    """Combat constants where abilities never trigger."""
    return CombatConstants(ability_trigger_chance=0.0)


@pytest.fixture
def tank_unit() -> CombatUnit:
    return make_unit("tank", role=Role.TANK, hp=1000, atk=100, defense=150, spd=50)


@pytest.fixture
def archer_unit() -> CombatUnit:
    return make_unit("archer", role=Role.ARCHER, team=Team.ENEMY, hp=500, atk=150, defense=40, spd=90)


@pytest.fixture
def enemy_line():
    """Three enemies on the front row, left to right."""
    return [
        make_unit(f"enemy_{col}", team=Team.ENEMY, position=Position(0, col))
        for col in range(3)
    ]
