"""
Performance benchmarks for the battle, dungeon and expedition engines.
"""
import pytest

from dungeon_gacha.core.data import Team
from dungeon_gacha.game.battle_simulation import BattleSimulation
from dungeon_gacha.game.dungeon_runner import DungeonRunner
from dungeon_gacha.game.entities import create_character_unit, create_enemy_unit
from dungeon_gacha.game.expeditions import ExpeditionConfig, preview_expedition

PARTY = ("char_001", "char_008", "char_016", "char_021")
ENEMIES = ("enemy_goblin", "enemy_orc_brute", "enemy_necromancer", "enemy_shaman", "boss_goblin_king")


@pytest.fixture
def full_roster(catalog):
    party = [create_character_unit(catalog, catalog.get_character(cid), level=15) for cid in PARTY]
    enemies = [
        create_enemy_unit(catalog, catalog.get_enemy(eid), team=Team.ENEMY, unit_id=f"{eid}_{i}")
        for i, eid in enumerate(ENEMIES)
    ]
    return party, enemies


@pytest.mark.performance
class TestBattlePerformance:
    """Benchmark full battle simulations."""

    def test_single_battle(self, benchmark, catalog, full_roster):
        party, enemies = full_roster
        simulation = BattleSimulation(party, enemies, catalog.abilities, seed=1, constants=catalog.combat)

        result = benchmark(simulation.simulate)
        assert result.turn_count <= catalog.combat.max_turns

    def test_many_seeds(self, benchmark, catalog, full_roster):
        party, enemies = full_roster

        def run_seeds():
            return [
                BattleSimulation(party, enemies, catalog.abilities, seed=seed,
                                 constants=catalog.combat).simulate()
                for seed in range(25)
            ]

        results = benchmark(run_seeds)
        assert len(results) == 25

    def test_dungeon_run(self, benchmark, catalog):
        dungeon = catalog.get_dungeon("dungeon_goblin_warren")
        party = [create_character_unit(catalog, catalog.get_character(cid), level=10) for cid in PARTY]

        result = benchmark(DungeonRunner(catalog).run, dungeon, party, 5)
        assert result.rooms


@pytest.mark.performance
class TestExpeditionPerformance:
    @pytest.mark.parametrize("hours", [1, 12])
    def test_preview_sweep(self, benchmark, hours):
        config = ExpeditionConfig()

        def sweep():
            return [preview_expedition(power, hours, config) for power in range(0, 50_000, 50)]

        previews = benchmark(sweep)
        assert len(previews) == 1000
