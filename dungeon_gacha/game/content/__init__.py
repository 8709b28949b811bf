"""Content definitions, the catalog and the document loader."""

from .content_catalog import CURRENT_CONTENT_VERSION, ContentCatalog
from .content_loader import DEFAULT_CONTENT_PATH, ContentLoader
from .content_structures import (
    AbilityDefinition,
    CharacterDefinition,
    ContentError,
    Dungeon,
    DungeonRoom,
    DungeonRoomEnemy,
    EnemyTemplate,
    GachaConfig,
    SummonTemplate,
)

__all__ = [
    "CURRENT_CONTENT_VERSION",
    "ContentCatalog",
    "DEFAULT_CONTENT_PATH",
    "ContentLoader",
    "AbilityDefinition",
    "CharacterDefinition",
    "ContentError",
    "Dungeon",
    "DungeonRoom",
    "DungeonRoomEnemy",
    "EnemyTemplate",
    "GachaConfig",
    "SummonTemplate",
]
