"""
Log management for battle messages and debugging.

This module provides centralized logging with categorization and filtering.
The log manager listens to battle events on the event bus, so the simulator
never talks to it directly.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..core.data import FACTION_PLURALS
from ..core.events import EventType

if TYPE_CHECKING:
    from ..core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # Startup, loading, saving
    ROUND = auto()      # Round boundaries
    BATTLE = auto()     # Defeats and battle resolution
    ATTACK = auto()     # Individual attacks
    MOVEMENT = auto()   # Unit steps
    BOOST = auto()      # Elf boost search attempts
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.ROUND: "RND",
    LogCategory.BATTLE: "BTL",
    LogCategory.ATTACK: "ATK",
    LogCategory.MOVEMENT: "MOV",
    LogCategory.BOOST: "BST",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogMessage:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Render as `[TAG] text`, optionally prefixed with the time."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogManager:
    """Collects battle messages from the event bus."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Subscribe to battle events on event_manager.

        Args:
            event_manager: Bus the simulator publishes on
            max_messages: Oldest messages are dropped beyond this many
            default_level: Lowest level returned by get_messages()
        """
        self.messages: deque[LogMessage] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager

        # Categories not listed here are INFO
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.ROUND: LogLevel.DEBUG,
            LogCategory.ATTACK: LogLevel.DEBUG,
            LogCategory.MOVEMENT: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        subscriptions = {
            EventType.ROUND_COMPLETED: self._handle_round_completed,
            EventType.UNIT_MOVED: self._handle_unit_moved,
            EventType.UNIT_ATTACKED: self._handle_unit_attacked,
            EventType.UNIT_DEFEATED: self._handle_unit_defeated,
            EventType.BATTLE_RESOLVED: self._handle_battle_resolved,
            EventType.LOG_MESSAGE: self._handle_log_message_event,
        }
        for event_type, handler in subscriptions.items():
            self.event_manager.subscribe(
                event_type,
                handler,
                subscriber_name=f"LogManager.{event_type.name.lower()}"
            )

    def _handle_round_completed(self, event) -> None:
        self.log(
            f"Round {event.round_number} complete, {event.remaining_hit_points} hit points remain",
            LogCategory.ROUND
        )

    def _handle_unit_moved(self, event) -> None:
        self.log(
            f"{event.unit.name} moves {tuple(event.from_position)} -> {tuple(event.unit.position)}",
            LogCategory.MOVEMENT
        )

    def _handle_unit_attacked(self, event) -> None:
        self.log(
            f"{event.attacker.name} hits {event.target.name} for {event.damage} ({event.target_hp} hp left)",
            LogCategory.ATTACK
        )

    def _handle_unit_defeated(self, event) -> None:
        killer = f" by {event.defeated_by.name}" if event.defeated_by is not None else ""
        self.log(
            f"{event.unit.name} defeated{killer} in round {event.round_number}",
            LogCategory.BATTLE
        )

    def _handle_battle_resolved(self, event) -> None:
        winner = FACTION_PLURALS[event.winner] if event.winner is not None else "Nobody"
        self.log(
            f"{winner} win after {event.completed_rounds} full rounds with "
            f"{event.remaining_hit_points} hit points left",
            LogCategory.BATTLE
        )

    def _handle_log_message_event(self, event) -> None:
        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM
        self.log(event.message, category)

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        """Add a message to the log.

        Messages are always stored; filtering happens when reading.
        """
        self.messages.append(LogMessage(text=text, category=category))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def _is_visible(self, message: LogMessage) -> bool:
        level = self.category_levels.get(message.category, LogLevel.INFO)
        return message.category in self.enabled_categories and level.value >= self.log_level.value

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogMessage]:
        """Get recent messages, oldest first.

        Args:
            count: Keep only the last count messages (None for all)
            categories: Return these enabled categories regardless of the log
                level; without it every visible message at the current level
        """
        if categories:
            selected = [m for m in self.messages
                        if m.category in categories and m.category in self.enabled_categories]
        else:
            selected = [m for m in self.messages if self._is_visible(m)]

        return selected[-count:] if count else selected

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save all messages to a timestamped log file.

        Every buffered message is written, ignoring the current filters.

        Returns:
            Path of the written file, or None if writing failed
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(log_dir, f"battle_{timestamp}.log")

        try:
            os.makedirs(log_dir, exist_ok=True)
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Skirmish - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("-" * 60 + "\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                    f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")
        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Battle log saved to {filepath}")
        return filepath
