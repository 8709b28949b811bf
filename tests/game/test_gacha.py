"""
Tests for gacha rarity rolls, pool selection and pity counters.
"""

from unittest.mock import Mock

import pytest

from dungeon_gacha.core.data import Rarity, Role
from dungeon_gacha.core.engine.rng import SeededRNG
from dungeon_gacha.game.content import CharacterDefinition, ContentCatalog, GachaConfig
from dungeon_gacha.game.gacha import RARITY_ORDER, GachaMachine
from tests.test_utils import logged_messages


def _catalog(rates=None, pool=(), rarities=(Rarity.COMMON, Rarity.RARE)):
    characters = [
        CharacterDefinition(id=f"c{i}", name=f"Char {i}", role=Role.WARRIOR, rarity=rarity)
        for i, rarity in enumerate(rarities)
    ]
    gacha = GachaConfig(character_pool=tuple(pool), rates=rates) if rates else GachaConfig(
        character_pool=tuple(pool)
    )
    return ContentCatalog.from_entries(characters=characters, gacha=gacha)


class TestRarityRoll:
    """Test the cumulative rarity table."""

    def test_single_rate(self):
        machine = GachaMachine(_catalog({Rarity.COMMON: 1.0}))
        rng = SeededRNG(5)
        assert {machine.roll_rarity(rng) for _ in range(50)} == {Rarity.COMMON}

    def test_gap_goes_to_rarest_configured_tier(self):
        machine = GachaMachine(_catalog({Rarity.EPIC: 0.5}))
        rng = SeededRNG(5)
        assert {machine.roll_rarity(rng) for _ in range(100)} == {Rarity.EPIC}

    def test_all_zero_rates(self):
        machine = GachaMachine(_catalog({Rarity.COMMON: 0.0}))
        assert machine.roll_rarity(SeededRNG(1)) is Rarity.LEGENDARY

    def test_default_rates_distribution(self, catalog):
        machine = GachaMachine(catalog)
        rng = SeededRNG(2024)
        rolls = [machine.roll_rarity(rng) for _ in range(2000)]
        assert 0.70 < rolls.count(Rarity.COMMON) / len(rolls) < 0.78
        assert set(rolls) <= set(RARITY_ORDER)


class TestPulls:
    """Test pool handling and pity bookkeeping."""

    def test_pool_defaults_to_every_character(self):
        machine = GachaMachine(_catalog())
        assert [c.id for c in machine.pool] == ["c0", "c1"]

    def test_configured_pool_ignores_unknown_ids(self):
        machine = GachaMachine(_catalog(pool=("c1", "ghost")))
        assert [c.id for c in machine.pool] == ["c1"]

    def test_pull_matches_rolled_rarity(self):
        machine = GachaMachine(_catalog({Rarity.RARE: 1.0}))
        pull = machine.pull(SeededRNG(3))
        assert pull.character_id == "c1"
        assert pull.rarity is pull.rolled_rarity is Rarity.RARE
        assert pull.starlight_value == 50

    def test_falls_back_to_whole_pool(self):
        machine = GachaMachine(_catalog({Rarity.LEGENDARY: 1.0}, rarities=(Rarity.COMMON,)))
        pull = machine.pull(SeededRNG(3))
        assert pull.rolled_rarity is Rarity.LEGENDARY
        assert pull.rarity is Rarity.COMMON

    def test_pity_resets_for_obtained_rarity(self):
        machine = GachaMachine(_catalog({Rarity.COMMON: 1.0}), pity_counters={Rarity.LEGENDARY: 40})
        machine.pull_many(3, SeededRNG(9))
        assert machine.pity(Rarity.COMMON) == 0
        assert machine.pity(Rarity.RARE) == 3
        assert machine.pity(Rarity.LEGENDARY) == 43

    def test_empty_pool_raises(self):
        machine = GachaMachine(ContentCatalog.from_entries())
        with pytest.raises(ValueError, match="empty"):
            machine.pull(SeededRNG(1))

    @pytest.mark.parametrize("count", [0, -2])
    def test_pull_many_non_positive(self, count):
        assert GachaMachine(_catalog()).pull_many(count, SeededRNG(1)) == []

    def test_same_seed_same_pulls(self, catalog):
        first = GachaMachine(catalog).pull_many(20, SeededRNG(77))
        second = GachaMachine(catalog).pull_many(20, SeededRNG(77))
        assert first == second

    def test_pull_is_logged(self):
        spy = Mock()
        pull = GachaMachine(_catalog({Rarity.COMMON: 1.0}), event_emitter=spy).pull(SeededRNG(1))
        assert logged_messages(spy) == ["Pulled Char 0 (common)"]
        assert pull.to_dict()["rarity"] == "common"
