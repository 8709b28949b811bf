"""
Unit tests for CombatUnit state and the content-to-unit factories.
"""

from unittest.mock import Mock

import pytest

from dungeon_gacha.core.data import MAX_SUMMONS_LIMIT, Rarity, Role, StatBlock, Team
from dungeon_gacha.game.content import ContentCatalog, SummonTemplate
from dungeon_gacha.game.entities import (
    SummonerConfig,
    create_character_unit,
    create_enemy_unit,
    create_summon_unit,
    resolve_ability_ids,
)
from tests.test_utils import logged_messages, make_unit


class TestCombatUnit:
    """Test per-battle unit state."""

    def test_defaults_to_full_hp(self):
        unit = make_unit("a", hp=120)
        assert unit.current_hp == 120
        assert unit.is_alive
        assert unit.hp_ratio == 1.0

    def test_zero_hp_starts_dead(self):
        assert not make_unit("a", current_hp=0).is_alive

    def test_take_damage_clamps_at_zero(self):
        unit = make_unit("a", hp=50)
        assert unit.take_damage(80) == 50
        assert unit.current_hp == 0
        # Death is flagged by the combat resolver, not here
        assert unit.is_alive

    def test_heal_clamps_at_max(self):
        unit = make_unit("a", hp=100, current_hp=40)
        assert unit.heal(100) == 60
        assert unit.current_hp == 100

    def test_cooldown_ticks_to_zero(self):
        unit = make_unit("a")
        unit.cooldown_remaining = 1
        assert not unit.ability_ready
        unit.tick_cooldown()
        unit.tick_cooldown()
        assert unit.cooldown_remaining == 0
        assert unit.ability_ready

    def test_clone_is_independent(self):
        unit = make_unit("a", ability_ids=["x"])
        copy = unit.clone()
        copy.take_damage(10)
        copy.ability_ids.append("y")
        assert unit.current_hp == unit.max_hp
        assert unit.ability_ids == ["x"]

    def test_summoner_cap_is_clamped(self):
        template = SummonTemplate(id="t", name="T", role=Role.MAGE)
        assert SummonerConfig((template,), max_summons=0).max_summons == 1
        assert SummonerConfig((template,), max_summons=99).max_summons == MAX_SUMMONS_LIMIT


class TestCharacterFactory:
    """Test building units from the bundled catalog."""

    def test_character_stats_follow_role_and_rarity(self, catalog):
        unit = create_character_unit(catalog, catalog.get_character("char_016"))  # legendary tank
        assert unit.role is Role.TANK
        assert unit.stats == StatBlock(hp=1500, atk=120, defense=225, spd=75)
        assert unit.ability_ids == ["ability_taunt"]
        assert unit.team is Team.PLAYER

    def test_level_and_ascension_recorded(self, catalog):
        unit = create_character_unit(catalog, catalog.get_character("char_001"), level=5, ascension=1)
        assert (unit.level, unit.ascension) == (5, 1)
        assert unit.max_hp > catalog.role_stats[Role.TANK].hp

    def test_summoner_templates_resolve(self, catalog):
        unit = create_character_unit(catalog, catalog.get_character("char_021"))
        assert unit.is_summoner
        assert [t.id for t in unit.summoner.templates] == ["summon_wisp", "summon_bone_guard"]
        assert unit.summoner.max_summons == 2

    def test_enemy_difficulty_scales_all_but_speed(self, catalog):
        template = catalog.get_enemy("enemy_goblin")
        normal = create_enemy_unit(catalog, template)
        hard = create_enemy_unit(catalog, template, difficulty_mult=2.0, unit_id="g2")
        assert hard.id == "g2"
        assert hard.max_hp >= 2 * normal.max_hp - 1
        assert hard.spd == normal.spd
        assert hard.team is Team.ENEMY

    def test_boss_flag_carries_over(self, catalog):
        boss = create_enemy_unit(catalog, catalog.get_enemy("boss_goblin_king"))
        assert boss.is_boss
        assert len(boss.ability_ids) == 3


class TestAbilityResolution:
    """Test ability id filtering against the catalog."""

    def test_unknown_ids_dropped_with_warning(self, catalog):
        spy = Mock()
        ids = resolve_ability_ids(catalog, ("ability_heal", "ability_missing"), Role.HEALER, "x", spy)
        assert ids == ["ability_heal"]
        assert any("ability_missing" in m for m in logged_messages(spy, "WARNING"))

    def test_empty_list_gets_role_default(self, catalog):
        assert resolve_ability_ids(catalog, (), Role.MAGE, "x") == ["ability_fireball"]

    def test_all_unknown_means_basic_attacks_only(self, catalog):
        assert resolve_ability_ids(catalog, ("nope",), Role.MAGE, "x") == []

    def test_no_default_in_empty_catalog(self):
        assert resolve_ability_ids(ContentCatalog(), (), Role.MAGE, "x") == []


class TestSummonFactory:
    """Test summon unit creation."""

    def test_summon_inherits_level_and_team(self):
        summoner = make_unit("boss", role=Role.SUMMONER, team=Team.ENEMY)
        summoner.level = 7
        summoner.ascension = 2
        template = SummonTemplate(id="imp", name="Imp", role=Role.ASSASSIN, rarity=Rarity.COMMON,
                                  ability_ids=("ability_backstab", "unknown"))
        unit = create_summon_unit(template, summoner, "boss_imp_s1", {"ability_backstab": object()})

        assert unit.team is Team.ENEMY
        assert unit.summoner_id == "boss"
        assert unit.is_summon
        assert (unit.level, unit.ascension) == (7, 2)
        assert unit.ability_ids == ["ability_backstab"]

    def test_template_level_wins(self):
        summoner = make_unit("s", role=Role.SUMMONER)
        summoner.level = 10
        template = SummonTemplate(id="imp", name="Imp", role=Role.ASSASSIN, level=1, ascension=0)
        unit = create_summon_unit(template, summoner, "s_imp_s1", {})
        assert unit.level == 1
        assert unit.stats == create_summon_unit(
            template, make_unit("t", role=Role.SUMMONER), "x", {}
        ).stats

    @pytest.mark.parametrize("summon_id", ["enemy_skeleton", "char_001"])
    def test_enemies_and_characters_are_summonable(self, catalog, summon_id):
        assert catalog.resolve_summon(summon_id).id == summon_id
