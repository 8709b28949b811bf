"""Event system for publisher-subscriber communication.

This package contains the event-driven plumbing:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions emitted by the engine
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    BattleStarted,
    RoundStarted,
    ActionResolved,
    UnitDefeated,
    UnitSummoned,
    BattleEnded,
    ExpeditionDispatched,
    ExpeditionResolved,
    ContentLoaded,
    LogMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "BattleStarted",
    "RoundStarted",
    "ActionResolved",
    "UnitDefeated",
    "UnitSummoned",
    "BattleEnded",
    "ExpeditionDispatched",
    "ExpeditionResolved",
    "ContentLoaded",
    "LogMessage",
    "LogSaveRequested",
]
