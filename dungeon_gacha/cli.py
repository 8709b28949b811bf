"""
Command-line front end for running battles, expeditions and dungeons.

All output goes through the LogManager: engine components publish events to
an EventManager, the LogManager collects them, and echoes visible entries to
stdout. ``--json`` prints the raw result instead.
"""

import argparse
import json
import sys
import time
from typing import Optional

from .core.data import Team
from .core.engine.rng import SeededRNG
from .core.events import EventManager
from .game.battle_simulation import BattleSimulation
from .game.content import ContentCatalog, ContentLoader
from .game.dungeon_runner import DungeonRunner
from .game.entities.stats import calculate_team_power
from .game.entities.unit_templates import create_character_unit, create_enemy_unit
from .game.expeditions import dispatch_expedition, preview_expedition, resolve_expedition
from .game.log_manager import LogLevel, LogManager

DEFAULT_PARTY = ["char_001", "char_003", "char_004", "char_008"]
DEFAULT_ENEMIES = ["enemy_goblin", "enemy_goblin", "enemy_goblin_archer"]


def _load_catalog(args: argparse.Namespace, event_manager: EventManager) -> ContentCatalog:
    if args.content:
        return ContentLoader.load_from_file(args.content, event_manager.publish)
    return ContentLoader.load_default(event_manager.publish)


def _build_party(catalog: ContentCatalog, args: argparse.Namespace, event_manager: EventManager):
    return [
        create_character_unit(
            catalog,
            catalog.get_character(character_id),
            level=args.level,
            ascension=args.ascension,
            team=Team.PLAYER,
            event_emitter=event_manager.publish,
        )
        for character_id in args.characters
    ]


def cmd_battle(args: argparse.Namespace, event_manager: EventManager, logs: LogManager) -> int:
    catalog = _load_catalog(args, event_manager)
    party = _build_party(catalog, args, event_manager)
    enemies = [
        create_enemy_unit(
            catalog,
            catalog.get_enemy(enemy_id),
            team=Team.ENEMY,
            unit_id=f"{enemy_id}_{index + 1}",
            event_emitter=event_manager.publish,
        )
        for index, enemy_id in enumerate(args.enemies)
    ]

    simulation = BattleSimulation(
        party,
        enemies,
        catalog.abilities,
        seed=args.seed,
        constants=catalog.combat,
        role_stats=catalog.role_stats,
        rarity_multipliers=catalog.rarity_multipliers,
        event_emitter=event_manager.publish,
    )
    result = simulation.simulate()
    event_manager.process_events()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    logs.system(
        f"Winner: {result.winner.name.lower()} after {result.turn_count} rounds (seed {result.seed})"
    )
    logs.system(f"Survivors: {', '.join(result.player_survivors + result.enemy_survivors) or 'none'}")
    return 0


def cmd_expedition(args: argparse.Namespace, event_manager: EventManager, logs: LogManager) -> int:
    catalog = _load_catalog(args, event_manager)
    party = _build_party(catalog, args, event_manager)
    config = catalog.expedition

    team_power = calculate_team_power((unit.stats, unit.role) for unit in party)
    preview = preview_expedition(team_power, args.duration, config)
    if preview is None:
        logs.error(f"Unknown duration {args.duration}h; available: {config.durations}")
        return 2

    logs.expedition(
        f"Preview: power {team_power} (ratio {preview.power_ratio:.2f}), "
        f"~{preview.expected_waves:.2f}/{preview.total_waves} waves, "
        f"clear chance {preview.clear_chance:.1%}, gacha {preview.gacha_chance:.1%}"
    )

    now_ms = args.seed if args.seed is not None else int(time.time() * 1000)
    try:
        expedition = dispatch_expedition(
            "cli",
            [(unit.id, unit.stats, unit.role) for unit in party],
            args.duration,
            config,
            now_ms,
            event_manager.publish,
        )
    except ValueError as e:
        logs.error(str(e))
        event_manager.process_events()
        return 2

    result = resolve_expedition(expedition, config, SeededRNG(now_ms), event_manager.publish)
    event_manager.process_events()

    if args.json:
        print(json.dumps({"preview": preview.to_dict(), "result": result.to_dict()}, indent=2))
    return 0


def cmd_dungeon(args: argparse.Namespace, event_manager: EventManager, logs: LogManager) -> int:
    catalog = _load_catalog(args, event_manager)
    if not catalog.dungeons:
        logs.error("Content has no dungeons")
        event_manager.process_events()
        return 2
    dungeon_id = args.dungeon or next(iter(catalog.dungeons))
    dungeon = catalog.get_dungeon(dungeon_id)
    party = _build_party(catalog, args, event_manager)

    seed = args.seed if args.seed is not None else int(time.time() * 1000)
    result = DungeonRunner(catalog, event_manager.publish).run(dungeon, party, seed)
    event_manager.process_events()

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    logs.dungeon(
        f"{dungeon.name}: {result.rooms_cleared}/{len(dungeon.rooms)} rooms, "
        f"{result.total_xp} XP" + (" (cleared)" if result.cleared else "")
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dungeon-gacha",
        description="Run dungeon gacha battles, expeditions and dungeons",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dungeon-gacha battle --seed 42
  dungeon-gacha battle --characters char_016 char_018 --enemies boss_goblin_king --json
  dungeon-gacha expedition --duration 4 --level 10
  dungeon-gacha dungeon --seed 7 --level 5
        """,
    )
    parser.add_argument("--content", help="Content document (YAML or JSON); defaults to the bundled one")
    parser.add_argument("--debug", action="store_true", help="Show debug and AI messages")
    parser.add_argument("--save-log", metavar="DIR", help="Save the full log to DIR when done")

    def add_common(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--characters", nargs="+", default=DEFAULT_PARTY, help="Character ids")
        sub.add_argument("--level", type=int, default=1)
        sub.add_argument("--ascension", type=int, default=0)
        sub.add_argument("--seed", type=int, default=None)
        sub.add_argument("--json", action="store_true", help="Print the result as JSON")

    subparsers = parser.add_subparsers(dest="command", required=True)

    battle = subparsers.add_parser("battle", help="Simulate one battle")
    add_common(battle)
    battle.add_argument("--enemies", nargs="+", default=DEFAULT_ENEMIES, help="Enemy template ids")
    battle.set_defaults(handler=cmd_battle)

    expedition = subparsers.add_parser("expedition", help="Preview and resolve an expedition")
    add_common(expedition)
    expedition.add_argument("--duration", type=int, default=1, help="Duration tier in hours")
    expedition.set_defaults(handler=cmd_expedition)

    dungeon = subparsers.add_parser("dungeon", help="Run a full dungeon")
    add_common(dungeon)
    dungeon.add_argument("--dungeon", help="Dungeon id; defaults to the first one")
    dungeon.set_defaults(handler=cmd_dungeon)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    event_manager = EventManager()
    # JSON mode keeps stdout clean for the result
    logs = LogManager(event_manager, echo=None if args.json else print)
    if args.debug:
        logs.set_log_level(LogLevel.DEBUG)

    try:
        code = args.handler(args, event_manager, logs)
    except (FileNotFoundError, ValueError, KeyError) as e:
        logs.error(f"{type(e).__name__}: {e}")
        if args.json:
            print(str(e), file=sys.stderr)
        code = 1

    if args.save_log:
        logs.save_log_to_file(args.save_log)
    event_manager.shutdown()
    return code


if __name__ == "__main__":
    sys.exit(main())
