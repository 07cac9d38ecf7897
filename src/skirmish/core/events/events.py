"""Battle events published by the simulator.

Event Design Principles:
- Events are immutable dataclasses with rich object payloads
- All events include the round_number in which they happened
- Events use rich objects (Unit, Vector2) instead of primitive fields
- Events use proper enums instead of magic strings
"""

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ..data import Faction

if TYPE_CHECKING:
    from ..data.data_structures import Vector2
    from ...game.entities.unit import Unit


class EventType(Enum):
    """Types of battle events that subscribers can listen to."""
    # Round events
    ROUND_STARTED = auto()
    ROUND_COMPLETED = auto()

    # Unit events
    UNIT_MOVED = auto()
    UNIT_ATTACKED = auto()
    UNIT_DEFEATED = auto()

    # Battle events
    BATTLE_RESOLVED = auto()

    # Logging events
    LOG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all battle events."""
    round_number: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class RoundStarted(GameEvent):
    """Event emitted before the first turn of a round."""
    unit_count: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ROUND_STARTED)


@dataclass(frozen=True)
class RoundCompleted(GameEvent):
    """Event emitted when every unit alive at round start has had its turn."""
    remaining_hit_points: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ROUND_COMPLETED)


@dataclass(frozen=True)
class UnitMoved(GameEvent):
    """Event emitted when a unit steps to a new position."""
    unit: "Unit"  # unit.position contains destination after movement
    from_position: "Vector2"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_MOVED)


@dataclass(frozen=True)
class UnitAttacked(GameEvent):
    """Event emitted when an attack lands."""
    attacker: "Unit"
    target: "Unit"
    damage: int
    target_hp: int  # Hit points left right after this attack

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_ATTACKED)


@dataclass(frozen=True)
class UnitDefeated(GameEvent):
    """Event emitted when a unit is removed from the battlefield."""
    unit: "Unit"
    defeated_by: Optional["Unit"] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.UNIT_DEFEATED)


@dataclass(frozen=True)
class BattleResolved(GameEvent):
    """Event emitted once when a faction has no units left to fight."""
    winner: Optional[Faction]
    completed_rounds: int
    remaining_hit_points: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BATTLE_RESOLVED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Free-form message routed to the log manager."""
    message: str
    category: str = "system"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)
