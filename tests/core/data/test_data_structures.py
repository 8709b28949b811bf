"""
Unit tests for the core value types, enums and combat constants.
"""

import pytest

from dungeon_gacha.core.data import (
    DEFAULT_ROLE_ABILITIES,
    ROLE_BASE_STATS,
    ROLE_PREFERRED_ROW,
    CombatConstants,
    Position,
    Role,
    StatBlock,
    StatOverrides,
    TargetingMode,
    Team,
)


class TestPosition:
    """Test formation grid positions."""

    @pytest.mark.parametrize("row,col", [(0, 0), (2, 2), (1, 0)])
    def test_valid_cells(self, row, col):
        assert Position(row, col).is_valid()

    @pytest.mark.parametrize("row,col", [(-1, 0), (3, 0), (0, 3), (0, -1)])
    def test_invalid_cells(self, row, col):
        assert not Position(row, col).is_valid()

    def test_dict_round_trip(self):
        """Positions serialize as row/col mappings."""
        assert Position.from_dict({"row": 2, "col": 1}) == Position(2, 1)
        assert Position(1, 2).to_dict() == {"row": 1, "col": 2}

    def test_positions_are_hashable(self):
        assert len({Position(0, 0), Position(0, 0), Position(1, 0)}) == 2


class TestStatBlock:
    """Test the four-stat block."""

    def test_defense_serialized_as_def(self):
        stats = StatBlock(hp=100, atk=20, defense=5, spd=30)
        assert stats.to_dict() == {"hp": 100, "atk": 20, "def": 5, "spd": 30}

    def test_from_dict_accepts_def_or_defense(self):
        assert StatBlock.from_dict({"hp": 1, "atk": 2, "def": 3, "spd": 4}).defense == 3
        assert StatBlock.from_dict({"hp": 1, "atk": 2, "defense": 7, "spd": 4}).defense == 7

    def test_to_array_order(self):
        assert list(StatBlock(1, 2, 3, 4).to_array()) == [1.0, 2.0, 3.0, 4.0]


class TestStatOverrides:
    """Test per-template stat multipliers."""

    def test_missing_data_gives_identity(self):
        assert StatOverrides.from_dict(None) == StatOverrides()
        assert StatOverrides.from_dict({"atk_mult": 2}).hp_mult == 1.0

    def test_scaled_leaves_speed_alone(self):
        scaled = StatOverrides(hp_mult=2.0, spd_mult=1.5).scaled(1.5)
        assert scaled.hp_mult == pytest.approx(3.0)
        assert scaled.atk_mult == pytest.approx(1.5)
        assert scaled.spd_mult == pytest.approx(1.5)


class TestEnums:
    """Test enum helpers and role tables."""

    def test_team_opponent(self):
        assert Team.PLAYER.opponent is Team.ENEMY
        assert Team.ENEMY.opponent is Team.PLAYER

    def test_roles_parse_from_document_spelling(self):
        assert Role("summoner") is Role.SUMMONER
        assert TargetingMode("aoe_first_n") is TargetingMode.AOE_FIRST_N

    def test_offensive_targeting_modes(self):
        assert TargetingMode.SINGLE_BACK_ROW.is_offensive
        assert not TargetingMode.HEAL_LOWEST_ALLY.is_offensive
        assert not TargetingMode.SUMMON_UNIT.is_offensive

    def test_every_role_has_tables(self):
        """Base stats, preferred rows and default abilities cover all roles."""
        for role in Role:
            assert role in ROLE_BASE_STATS
            assert ROLE_PREFERRED_ROW[role] in (0, 1, 2)
            assert DEFAULT_ROLE_ABILITIES[role].startswith("ability_")

    def test_tank_base_stats(self):
        assert ROLE_BASE_STATS[Role.TANK] == StatBlock(hp=1000, atk=80, defense=150, spd=50)


class TestCombatConstants:
    """Test combat constant parsing."""

    def test_defaults(self):
        constants = CombatConstants()
        assert constants.max_turns == 30
        assert constants.crit_chance == pytest.approx(0.05)
        assert constants.crit_multiplier == pytest.approx(2.0)
        assert constants.ability_trigger_chance == pytest.approx(0.25)

    def test_from_dict_keeps_defaults_and_ignores_unknown_keys(self):
        constants = CombatConstants.from_dict({"max_turns": "12", "crit_chance": 0.5, "bogus": 1})
        assert constants.max_turns == 12
        assert isinstance(constants.max_turns, int)
        assert constants.crit_chance == pytest.approx(0.5)
        assert constants.damage_variance == pytest.approx(0.1)

    def test_to_dict_round_trip(self):
        constants = CombatConstants(max_turns=5)
        assert CombatConstants.from_dict(constants.to_dict()) == constants
