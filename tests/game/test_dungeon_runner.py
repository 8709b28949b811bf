"""
Tests for multi-room dungeon runs.
"""

import json
from unittest.mock import Mock

import pytest

from dungeon_gacha.core.data import Position, Team
from dungeon_gacha.game.content import Dungeon, DungeonRoom, DungeonRoomEnemy
from dungeon_gacha.game.dungeon_runner import DungeonRunner
from dungeon_gacha.game.entities import create_character_unit
from tests.test_utils import logged_messages, make_small_catalog


def _party(catalog, *ids, level=1):
    return [create_character_unit(catalog, catalog.get_character(cid), level=level) for cid in ids]


class TestDungeonRunner:
    """Test room sequencing, seeding and HP carry-over."""

    @pytest.fixture
    def small_catalog(self):
        return make_small_catalog(rooms=3)

    def test_strong_party_clears_every_room(self, small_catalog):
        dungeon = small_catalog.get_dungeon("cellar")
        result = DungeonRunner(small_catalog).run(dungeon, _party(small_catalog, "hero", "medic"), seed=10)

        assert result.cleared
        assert result.rooms_cleared == 3
        assert result.total_xp == 10 + 20 + 30
        assert set(result.final_hp) == {"hero", "medic"}
        assert result.survivors

    def test_rooms_use_consecutive_seeds(self, small_catalog):
        dungeon = small_catalog.get_dungeon("cellar")
        result = DungeonRunner(small_catalog).run(dungeon, _party(small_catalog, "hero"), seed=500)
        assert [room.battle.seed for room in result.rooms] == [500, 501, 502]

    def test_hp_carries_between_rooms(self, small_catalog):
        dungeon = small_catalog.get_dungeon("cellar")
        result = DungeonRunner(small_catalog).run(dungeon, _party(small_catalog, "hero", "rookie"), seed=3)

        for previous, current in zip(result.rooms, result.rooms[1:]):
            starting = {u.id: u.current_hp for u in current.battle.initial_units if u.team is Team.PLAYER}
            for unit_id, hp in starting.items():
                assert hp == previous.battle.final_hp[unit_id]

    def test_loss_stops_the_run(self):
        catalog = make_small_catalog(rooms=3, enemy_atk_mult=50.0)
        dungeon = catalog.get_dungeon("cellar")
        result = DungeonRunner(catalog).run(dungeon, _party(catalog, "rookie"), seed=1)

        assert not result.cleared
        assert len(result.rooms) == 1
        assert not result.rooms[0].cleared
        assert result.total_xp == 0
        assert result.survivors == []

    def test_team_size_limits(self, small_catalog):
        runner = DungeonRunner(small_catalog)
        dungeon = small_catalog.get_dungeon("cellar")
        with pytest.raises(ValueError):
            runner.run(dungeon, [], seed=1)
        too_many = _party(small_catalog, "hero", "medic", "rookie") + _party(small_catalog, "hero")
        with pytest.raises(ValueError, match="limit"):
            runner.run(dungeon, too_many, seed=1)

    def test_unknown_enemy_template_is_skipped(self, small_catalog):
        spy = Mock()
        room = DungeonRoom(
            id="odd", name="Odd Room", room_number=1,
            enemies=(DungeonRoomEnemy("ghost"), DungeonRoomEnemy("rat", Position(0, 2))),
        )
        enemies = DungeonRunner(small_catalog, spy).build_room_enemies(room)

        assert [e.id for e in enemies] == ["rat_2"]
        assert enemies[0].position == Position(0, 2)
        assert any("ghost" in m for m in logged_messages(spy, "WARNING"))

    def test_room_difficulty_scales_enemies(self, small_catalog):
        runner = DungeonRunner(small_catalog)
        easy = DungeonRoom(id="a", name="A", room_number=1, enemies=(DungeonRoomEnemy("rat"),))
        hard = DungeonRoom(id="b", name="B", room_number=1, enemies=(DungeonRoomEnemy("rat"),),
                           difficulty_mult=3.0)
        assert runner.build_room_enemies(hard)[0].max_hp > runner.build_room_enemies(easy)[0].max_hp

    def test_empty_dungeon_counts_as_cleared(self, small_catalog):
        dungeon = Dungeon(id="void", name="Void")
        party = _party(small_catalog, "hero")
        result = DungeonRunner(small_catalog).run(dungeon, party, seed=1)
        assert result.cleared
        assert result.final_hp == {"hero": party[0].max_hp}


class TestBundledDungeon:
    def test_run_is_reproducible(self, catalog):
        dungeon = catalog.get_dungeon("dungeon_goblin_warren")
        party_ids = ("char_016", "char_017", "char_018", "char_019")
        first = DungeonRunner(catalog).run(dungeon, _party(catalog, *party_ids, level=10), seed=77)
        second = DungeonRunner(catalog).run(dungeon, _party(catalog, *party_ids, level=10), seed=77)
        assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)
        assert first.rooms[0].room_id == "warren_room_1"
