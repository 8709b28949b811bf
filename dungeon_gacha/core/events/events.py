"""Engine events and their payloads.

This module defines the events that engine components emit while they work.
Components never depend on a subscriber being present; they receive an
optional emitter callable and stay silent without one.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events carry the battle round (``turn``) they belong to, 0 outside battles
- Events use proper enums instead of magic strings
- Keep event types focused and avoid over-granular events
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from ..data import Team

if TYPE_CHECKING:
    from ..engine.actions import CombatAction, UnitSnapshot
    from ...game.expeditions.expedition_structures import ExpeditionResult


class EventType(Enum):
    """Types of engine events that subscribers can listen to."""
    # Battle Events
    BATTLE_STARTED = auto()
    ROUND_STARTED = auto()
    ACTION_RESOLVED = auto()
    UNIT_DEFEATED = auto()
    UNIT_SUMMONED = auto()
    BATTLE_ENDED = auto()

    # Expedition Events
    EXPEDITION_DISPATCHED = auto()
    EXPEDITION_RESOLVED = auto()

    # Content Events
    CONTENT_LOADED = auto()

    # Logging Events
    LOG_MESSAGE = auto()

    # System Events
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all engine events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class BattleStarted(GameEvent):
    """Event emitted once the battle state is initialized."""
    player_ids: tuple[str, ...]
    enemy_ids: tuple[str, ...]
    seed: Optional[int] = None

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.BATTLE_STARTED)


@dataclass(frozen=True)
class RoundStarted(GameEvent):
    """Event emitted at the top of each round with the computed turn order."""
    turn_order: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_STARTED)


@dataclass(frozen=True)
class ActionResolved(GameEvent):
    """Event emitted for every entry appended to the action log."""
    action: "CombatAction"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ACTION_RESOLVED)


@dataclass(frozen=True)
class UnitDefeated(GameEvent):
    """Event emitted when a unit's HP reaches zero."""
    unit_id: str
    unit_name: str
    team: Team

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DEFEATED)


@dataclass(frozen=True)
class UnitSummoned(GameEvent):
    """Event emitted when a summoner brings a new unit into the battle."""
    summoner_id: str
    unit: "UnitSnapshot"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_SUMMONED)


@dataclass(frozen=True)
class BattleEnded(GameEvent):
    """Event emitted when a winner has been decided."""
    winner: Team
    turn_count: int
    reason: str = "elimination"  # "elimination", "turn_limit", "empty_roster"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_ENDED)


@dataclass(frozen=True)
class ExpeditionDispatched(GameEvent):
    """Event emitted when a team leaves on an expedition."""
    expedition_id: str
    team_character_ids: tuple[str, ...]
    duration_hours: int
    team_power: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.EXPEDITION_DISPATCHED)


@dataclass(frozen=True)
class ExpeditionResolved(GameEvent):
    """Event emitted when an expedition has been turned into rewards."""
    expedition_id: str
    result: "ExpeditionResult"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.EXPEDITION_RESOLVED)


@dataclass(frozen=True)
class ContentLoaded(GameEvent):
    """Event emitted when a content catalog has been parsed."""
    source: str
    version: int
    character_count: int
    enemy_count: int
    dungeon_count: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CONTENT_LOADED)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: str = "INFO"
    source: str = "engine"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


# System Events
@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event emitted when the caller asks for the log buffer to be written out."""
    directory: str = "logs"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
