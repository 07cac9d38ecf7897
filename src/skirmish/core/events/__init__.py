"""Event system for publisher-subscriber communication.

This package contains the event-driven plumbing used to observe a battle:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions emitted by the simulator
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    RoundStarted,
    RoundCompleted,
    UnitMoved,
    UnitAttacked,
    UnitDefeated,
    BattleResolved,
    LogMessage,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "RoundStarted",
    "RoundCompleted",
    "UnitMoved",
    "UnitAttacked",
    "UnitDefeated",
    "BattleResolved",
    "LogMessage",
]
