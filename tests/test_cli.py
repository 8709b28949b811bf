"""
Tests for the dungeon-gacha command line.
"""

import json

import pytest
import yaml

from dungeon_gacha.cli import build_parser, main
from dungeon_gacha.game.content.content_loader import DEFAULT_CONTENT_PATH


class TestBattleCommand:
    def test_json_output(self, capsys):
        assert main(["battle", "--seed", "42", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["seed"] == 42
        assert data["winner"] in ("player", "enemy")
        assert len(data["initial_units"]) == 7

    def test_text_output_reports_winner(self, capsys):
        assert main(["battle", "--seed", "3", "--level", "10"]) == 0
        out = capsys.readouterr().out
        assert "[SYS] Winner:" in out
        assert "[BTL]" in out

    def test_same_seed_same_output(self, capsys):
        main(["battle", "--seed", "9", "--json"])
        first = capsys.readouterr().out
        main(["battle", "--seed", "9", "--json"])
        assert capsys.readouterr().out == first

    def test_unknown_character(self, capsys):
        assert main(["battle", "--characters", "char_999"]) == 1
        assert "KeyError" in capsys.readouterr().out

    def test_missing_content_file(self, tmp_path, capsys):
        assert main(["--content", str(tmp_path / "nope.yaml"), "battle"]) == 1
        assert "FileNotFoundError" in capsys.readouterr().out

    def test_content_warnings_keep_json_clean(self, tmp_path, capsys):
        doc = yaml.safe_load(DEFAULT_CONTENT_PATH.read_text(encoding="utf-8"))
        doc["gacha"]["rates"]["common"] = 0.5
        path = tmp_path / "skewed.yaml"
        path.write_text(yaml.safe_dump(doc), encoding="utf-8")

        assert main(["--content", str(path), "battle", "--seed", "4", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["seed"] == 4

    def test_content_warnings_shown_in_text_mode(self, tmp_path, capsys):
        doc = yaml.safe_load(DEFAULT_CONTENT_PATH.read_text(encoding="utf-8"))
        doc["gacha"]["rates"]["common"] = 0.5
        path = tmp_path / "skewed.yaml"
        path.write_text(yaml.safe_dump(doc), encoding="utf-8")

        assert main(["--content", str(path), "battle", "--seed", "4"]) == 0
        assert "[CNT] WARNING: skewed.yaml: Gacha rates sum to" in capsys.readouterr().out

    def test_duplicate_character_is_dropped(self, capsys):
        assert main(["battle", "--seed", "5", "--json", "--characters", "char_001", "char_001"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [u["id"] for u in data["initial_units"]].count("char_001") == 1


class TestExpeditionCommand:
    def test_json_output(self, capsys):
        assert main(["expedition", "--duration", "4", "--seed", "1000", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["preview"]["total_waves"] == data["result"]["total_waves"]

    def test_unknown_duration(self, capsys):
        assert main(["expedition", "--duration", "5"]) == 2
        assert "Unknown duration 5h" in capsys.readouterr().out

    def test_oversized_team(self, capsys):
        ids = ["char_001", "char_002", "char_003", "char_004", "char_005"]
        assert main(["expedition", "--seed", "1", "--characters", *ids]) == 2


class TestDungeonCommand:
    def test_json_output(self, capsys):
        assert main(["dungeon", "--seed", "7", "--level", "5", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["dungeon_id"] == "dungeon_goblin_warren"
        assert data["seed"] == 7

    def test_summary_line_and_saved_log(self, tmp_path, capsys):
        assert main(["--save-log", str(tmp_path), "dungeon", "--seed", "7"]) == 0
        assert "[DGN] Goblin Warren:" in capsys.readouterr().out
        assert len(list(tmp_path.glob("log_*.log"))) == 1


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
