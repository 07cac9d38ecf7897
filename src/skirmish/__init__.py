"""Turn-based goblin versus elf grid combat simulator."""

from .core import BattleConfig, load_config
from .core.data import Faction, Vector2
from .game import Battlefield, CombatSimulator, find_minimum_boost, simulate

__version__ = "0.1.0"

__all__ = [
    "BattleConfig",
    "load_config",
    "Faction",
    "Vector2",
    "Battlefield",
    "CombatSimulator",
    "find_minimum_boost",
    "simulate",
]
