"""
Loading of content documents (characters, enemies, abilities, dungeons, gacha
and expedition tables) from YAML or JSON into a ContentCatalog.

Older document versions are migrated while parsing. Problems that do not stop
loading are reported as CONTENT warnings through the event emitter.
"""

import json
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from ...core.data import (
    DEFAULT_LEVEL_THRESHOLDS,
    DEFAULT_RARITY_MULTIPLIERS,
    ROLE_BASE_STATS,
    CombatConstants,
    Rarity,
    Role,
    StatBlock,
)
from ...core.events import ContentLoaded, LogMessage
from ..expeditions.expedition_structures import ExpeditionConfig
from .content_catalog import CURRENT_CONTENT_VERSION, ContentCatalog
from .content_structures import (
    AbilityDefinition,
    CharacterDefinition,
    ContentError,
    Dungeon,
    EnemyTemplate,
    GachaConfig,
    SummonTemplate,
    _parse_enum,
)

DEFAULT_CONTENT_PATH = Path(__file__).resolve().parent.parent.parent / "assets" / "default_content.yaml"

LEGACY_DUNGEON_ID = "legacy_dungeon"
LEGACY_DUNGEON_NAME = "Legacy Dungeon"

# Tolerance when checking that gacha rates add up to 1.0
RATE_SUM_TOLERANCE = 1e-6


class ContentLoader:
    """Handles loading content catalogs from YAML or JSON documents."""

    @staticmethod
    def load_from_file(file_path: str, event_emitter: Optional[Callable] = None) -> ContentCatalog:
        """Load a content document; ``.json`` files are read as JSON, anything else as YAML."""
        path_obj = Path(file_path)

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if path_obj.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Content file not found: {file_path}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to parse content document {path_obj.name}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Content document {path_obj.name} must be a mapping at the top level")

        catalog = ContentLoader.parse(data)

        emit = event_emitter or (lambda e: None)
        for warning in ContentLoader.validate_catalog(catalog):
            emit(LogMessage(turn=0, message=f"{path_obj.name}: {warning}", category="CONTENT",
                            level="WARNING", source="ContentLoader"))

        emit(ContentLoaded(
            turn=0,
            source=str(path_obj),
            version=catalog.version,
            character_count=len(catalog.characters),
            enemy_count=len(catalog.enemies),
            dungeon_count=len(catalog.dungeons),
        ))
        return catalog

    @staticmethod
    def load_default(event_emitter: Optional[Callable] = None) -> ContentCatalog:
        """Load the content document bundled with the package."""
        return ContentLoader.load_from_file(str(DEFAULT_CONTENT_PATH), event_emitter)

    @staticmethod
    def parse(data: dict[str, Any]) -> ContentCatalog:
        """Build a catalog from a content document dictionary.

        Older documents are migrated on the way in: a missing ability list is
        filled from the bundled defaults, and a version-2 ``dungeon_rooms``
        list becomes a single dungeon.

        Raises:
            ContentError: If an entry is structurally invalid
        """
        version = int(data.get("version", 1))
        if version > CURRENT_CONTENT_VERSION:
            raise ContentError(
                f"Content version {version} is newer than supported version {CURRENT_CONTENT_VERSION}"
            )

        ability_entries = data.get("abilities")
        if ability_entries is None:
            ability_entries = _bundled_section("abilities")

        abilities = [AbilityDefinition.from_dict(a) for a in ability_entries]
        characters = [CharacterDefinition.from_dict(c) for c in data.get("characters") or []]
        enemies = [EnemyTemplate.from_dict(e) for e in data.get("enemies") or []]
        summons = [SummonTemplate.from_dict(s) for s in data.get("summons") or []]
        dungeons = [Dungeon.from_dict(d) for d in data.get("dungeons") or []]

        legacy_rooms = data.get("dungeon_rooms") or []
        if legacy_rooms and not any(d.id == LEGACY_DUNGEON_ID for d in dungeons):
            dungeons.append(_migrate_legacy_rooms(legacy_rooms))

        for kind, entries in (
            ("ability", abilities),
            ("character", characters),
            ("enemy", enemies),
            ("summon", summons),
            ("dungeon", dungeons),
        ):
            _check_unique(kind, [entry.id for entry in entries])

        return ContentCatalog.from_entries(
            characters=characters,
            enemies=enemies,
            summons=summons,
            abilities=abilities,
            dungeons=dungeons,
            role_stats=_parse_role_stats(data.get("role_stats")),
            rarity_multipliers=_parse_rarity_multipliers(data.get("rarity_multipliers")),
            level_thresholds=tuple(int(t) for t in data.get("level_thresholds") or DEFAULT_LEVEL_THRESHOLDS),
            gacha=GachaConfig.from_dict(data.get("gacha")),
            expedition=ExpeditionConfig.from_dict(data.get("expedition")),
            combat=CombatConstants.from_dict(data.get("combat")),
            version=CURRENT_CONTENT_VERSION,
        )

    @staticmethod
    def validate_catalog(catalog: ContentCatalog) -> list[str]:
        """Cross-reference checks that do not stop loading.

        Returns:
            Human-readable warnings; empty when the catalog is consistent
        """
        warnings = []

        def check_abilities(owner: str, ability_ids: tuple[str, ...]) -> None:
            for ability_id in ability_ids:
                if ability_id not in catalog.abilities:
                    warnings.append(f"{owner} references unknown ability '{ability_id}'")

        def check_summons(owner: str, summon_ids: tuple[str, ...]) -> None:
            for summon_id in summon_ids:
                if catalog.resolve_summon(summon_id) is None:
                    warnings.append(f"{owner} references unknown summon '{summon_id}'")

        for character in catalog.characters.values():
            check_abilities(f"Character {character.id}", character.ability_ids)
            check_summons(f"Character {character.id}", character.summon_ids)

        for enemy in catalog.enemies.values():
            check_abilities(f"Enemy {enemy.id}", enemy.ability_ids)
            check_summons(f"Enemy {enemy.id}", enemy.summon_ids)

        for summon in catalog.summons.values():
            check_abilities(f"Summon {summon.id}", summon.ability_ids)

        for dungeon in catalog.dungeons.values():
            if not dungeon.rooms:
                warnings.append(f"Dungeon {dungeon.id} has no rooms")
            for room in dungeon.rooms:
                if not room.enemies:
                    warnings.append(f"Dungeon {dungeon.id} room {room.id} has no enemies")
                for placement in room.enemies:
                    if placement.enemy_template_id not in catalog.enemies:
                        warnings.append(
                            f"Dungeon {dungeon.id} room {room.id} references unknown enemy "
                            f"'{placement.enemy_template_id}'"
                        )

        for character_id in catalog.gacha.character_pool:
            if character_id not in catalog.characters:
                warnings.append(f"Gacha pool references unknown character '{character_id}'")

        rate_sum = sum(catalog.gacha.rates.values())
        if abs(rate_sum - 1.0) > RATE_SUM_TOLERANCE:
            warnings.append(f"Gacha rates sum to {rate_sum:.4f}, expected 1.0")

        thresholds = catalog.level_thresholds
        if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
            warnings.append("Level thresholds are not strictly increasing")

        return warnings


def _bundled_section(name: str) -> list[dict[str, Any]]:
    with open(DEFAULT_CONTENT_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f).get(name) or []


def _migrate_legacy_rooms(rooms: list[dict[str, Any]]) -> Dungeon:
    return Dungeon.from_dict({
        "id": LEGACY_DUNGEON_ID,
        "name": LEGACY_DUNGEON_NAME,
        "description": "Rooms imported from a single-dungeon content document",
        "rooms": rooms,
    })


def _check_unique(kind: str, ids: list[str]) -> None:
    seen = set()
    for entry_id in ids:
        if entry_id in seen:
            raise ContentError(f"Duplicate {kind} id '{entry_id}'")
        seen.add(entry_id)


def _parse_role_stats(data: Optional[dict[str, Any]]) -> dict[Role, StatBlock]:
    role_stats = dict(ROLE_BASE_STATS)
    for name, stats in (data or {}).items():
        role = _parse_enum(Role, name, "role", "role_stats")
        try:
            role_stats[role] = StatBlock.from_dict(stats)
        except KeyError as e:
            raise ContentError(f"role_stats.{name} is missing stat {e}")
    return role_stats


def _parse_rarity_multipliers(data: Optional[dict[str, Any]]) -> dict[Rarity, float]:
    multipliers = dict(DEFAULT_RARITY_MULTIPLIERS)
    for name, value in (data or {}).items():
        multipliers[_parse_enum(Rarity, name, "rarity", "rarity_multipliers")] = float(value)
    return multipliers
