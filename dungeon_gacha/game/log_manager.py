"""
Log management for engine messages and debugging.

The engine never prints or writes logs itself; components emit LogMessage
events. This module collects those events into a bounded, categorized
buffer that a CLI or client can filter, echo, or save to disk.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional

from ..core.events import EventType, LogSaveRequested
from ..core.events import LogMessage as LogEvent

if TYPE_CHECKING:
    from ..core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()       # Startup, content loading summaries
    BATTLE = auto()       # Attacks, heals, deaths
    SUMMON = auto()       # Summoned units entering battle
    AI = auto()           # Ability/fallback decisions
    EXPEDITION = auto()   # Dispatch and resolution
    DUNGEON = auto()      # Room progress
    CONTENT = auto()      # Content problems found at build time
    PROGRESSION = auto()  # Level ups, gacha pulls
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.SUMMON: "SUM",
    LogCategory.AI: "AI",
    LogCategory.EXPEDITION: "EXP",
    LogCategory.DUNGEON: "DGN",
    LogCategory.CONTENT: "CNT",
    LogCategory.PROGRESSION: "PRG",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        try:
            return cls[str(name).upper()]
        except KeyError:
            return cls.INFO


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    level: LogLevel = LogLevel.INFO
    turn: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the entry for display, e.g. ``[BTL] Bruno attacks Goblin for 42 damage``."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        if self.level in (LogLevel.WARNING, LogLevel.ERROR) and self.category.name != self.level.name:
            parts.append(f"{self.level.name}:")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Collects engine log events with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        echo: Optional[Callable[[str], None]] = None,
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager to subscribe to
            max_messages: Maximum number of entries kept in the buffer
            default_level: Minimum level returned by get_messages
            echo: Called with each visible entry as it arrives, e.g. ``print``
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager
        self.echo = echo

        # Categories that only show at DEBUG level
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.AI: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message",
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request",
        )

    def _handle_log_message_event(self, event) -> None:
        if isinstance(event, LogEvent):
            try:
                category = LogCategory[event.category.upper()]
            except (KeyError, AttributeError):
                category = LogCategory.SYSTEM
            self.log(event.message, category, LogLevel.parse(event.level), turn=event.turn)

    def _handle_log_save_request(self, event) -> None:
        if isinstance(event, LogSaveRequested):
            if self.save_log_to_file(event.directory) is None:
                self.error("Failed to save log file")

    def effective_level(self, entry: LogEntry) -> LogLevel:
        """Level used for filtering; debug-only categories never rise above DEBUG."""
        category_level = self.category_levels.get(entry.category, LogLevel.INFO)
        if category_level is LogLevel.DEBUG:
            return LogLevel.DEBUG
        return max(entry.level, category_level, key=lambda level: level.value)

    def is_visible(self, entry: LogEntry) -> bool:
        if entry.category not in self.enabled_categories:
            return False
        return self.effective_level(entry).value >= self.log_level.value

    def log(
        self,
        text: str,
        category: LogCategory = LogCategory.SYSTEM,
        level: LogLevel = LogLevel.INFO,
        turn: int = 0,
    ) -> LogEntry:
        """Add an entry; it is stored regardless of current filters."""
        entry = LogEntry(text=text, category=category, level=level, turn=turn)
        self.messages.append(entry)
        if self.echo is not None and self.is_visible(entry):
            self.echo(entry.format())
        return entry

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        self.log(text, LogCategory.BATTLE)

    def expedition(self, text: str) -> None:
        self.log(text, LogCategory.EXPEDITION)

    def dungeon(self, text: str) -> None:
        self.log(text, LogCategory.DUNGEON)

    def progression(self, text: str) -> None:
        self.log(text, LogCategory.PROGRESSION)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG, LogLevel.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING, LogLevel.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR, LogLevel.ERROR)

    def get_messages(
        self,
        count: Optional[int] = None,
        categories: Optional[set[LogCategory]] = None,
    ) -> list[LogEntry]:
        """Get recent entries, optionally filtered by category.

        Args:
            count: Maximum number of entries to return (None for all)
            categories: Categories to include; None applies the level filter instead

        Returns:
            Entries oldest first
        """
        if categories:
            filtered = [e for e in self.messages
                        if e.category in categories and e.category in self.enabled_categories]
        else:
            filtered = [e for e in self.messages if self.is_visible(e)]

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def warnings(self) -> list[LogEntry]:
        """Every stored WARNING-or-worse entry, whatever its category."""
        return [e for e in self.messages if e.level.value >= LogLevel.WARNING.value]

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return LogCategory.DEBUG in self.enabled_categories and self.log_level == LogLevel.DEBUG

    def toggle_debug(self) -> None:
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, directory: str = "logs") -> Optional[str]:
        """Save every buffered entry, ignoring filters, to a timestamped file.

        Returns:
            The written path, or None if the file could not be written
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(directory, f"log_{timestamp}.log")

        try:
            os.makedirs(directory, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                f.write("Dungeon Gacha - Engine Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for entry in self.messages:
                    stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{stamp}] [{entry.category.name}] [{entry.level.name}] "
                            f"(round {entry.turn}) {entry.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Engine log saved to {filepath}")
        return filepath
