"""
Unit tests for battle action log records and their serialized form.
"""

from dungeon_gacha.core.data import ActionType, Position, Role, StatBlock, Team
from dungeon_gacha.core.engine.actions import AoeHit, BattleResult, CombatAction, UnitSnapshot


def _snapshot(unit_id: str = "u1") -> UnitSnapshot:
    return UnitSnapshot(
        id=unit_id,
        name="Unit",
        role=Role.MAGE,
        team=Team.PLAYER,
        stats=StatBlock(100, 10, 5, 40),
        current_hp=80,
        position=Position(2, 1),
    )


class TestCombatAction:
    """Test action log entries."""

    def test_single_target_dict(self):
        action = CombatAction(
            round=3, actor_id="a", actor_name="A", action_type=ActionType.ATTACK,
            target_id="b", target_name="B", damage=12, message="A attacks B for 12 damage",
        )
        data = action.to_dict()
        assert data["type"] == "attack"
        assert data["round"] == 3
        assert data["target_id"] == "b"
        assert "targets" not in data
        assert not action.is_aoe

    def test_aoe_dict_lists_hits(self):
        hits = (AoeHit("b", "B", 5), AoeHit("c", "C", 7, is_critical=True))
        action = CombatAction(
            round=1, actor_id="a", actor_name="A", action_type=ActionType.ABILITY,
            hits=hits, damage=12, ability_name="Cleave",
        )
        data = action.to_dict()
        assert action.is_aoe
        assert [t["id"] for t in data["targets"]] == ["b", "c"]
        assert data["targets"][1]["is_critical"] is True
        assert data["ability_name"] == "Cleave"
        assert "target_id" not in data

    def test_summon_dict_embeds_snapshot(self):
        action = CombatAction(
            round=2, actor_id="s", actor_name="S", action_type=ActionType.SUMMON,
            summoned_unit=_snapshot("s_wisp_s1"),
        )
        assert action.to_dict()["summoned_unit"]["id"] == "s_wisp_s1"


class TestUnitSnapshot:
    def test_max_hp_and_dict(self):
        snapshot = _snapshot()
        assert snapshot.max_hp == 100
        data = snapshot.to_dict()
        assert data["team"] == "player"
        assert data["role"] == "mage"
        assert data["position"] == {"row": 2, "col": 1}
        assert data["stats"]["def"] == 5


class TestBattleResult:
    def test_player_won_and_dict(self):
        result = BattleResult(winner=Team.PLAYER, action_log=[], turn_count=4, seed=9,
                              player_survivors=["u1"], initial_units=[_snapshot()],
                              final_hp={"u1": 80})
        data = result.to_dict()
        assert result.player_won
        assert data["winner"] == "player"
        assert data["seed"] == 9
        assert data["final_hp"] == {"u1": 80}
        assert data["initial_units"][0]["id"] == "u1"
        assert data["ended_by_turn_limit"] is False
