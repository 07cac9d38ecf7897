"""Battle logic.

- battlefield.py: arena grid, occupancy and unit bookkeeping
- pathfinding.py: breadth-first destination and first-step search
- combat_resolver.py: target selection and damage
- combat_simulator.py: round loop and battle state
- elf_boost.py: minimum flawless elf attack power search
- log_manager.py: event-driven battle log
"""

from .battlefield import Battlefield, BattlefieldError, BattlefieldParseError, BattleInvariantError
from .combat_resolver import CombatResolver, CombatResult
from .combat_simulator import (
    BattleOutcome,
    BattleStalemateError,
    BattleState,
    CombatSimulator,
    simulate,
)
from .elf_boost import BoostResult, find_minimum_boost
from .entities import Unit
from .log_manager import LogCategory, LogLevel, LogManager

__all__ = [
    "Battlefield",
    "BattlefieldError",
    "BattlefieldParseError",
    "BattleInvariantError",
    "CombatResolver",
    "CombatResult",
    "BattleOutcome",
    "BattleStalemateError",
    "BattleState",
    "CombatSimulator",
    "simulate",
    "BoostResult",
    "find_minimum_boost",
    "Unit",
    "LogCategory",
    "LogLevel",
    "LogManager",
]
