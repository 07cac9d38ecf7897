"""Core data structures and definitions.

This package contains fundamental data types and battle definitions:
- data_structures.py: Vector2 positions compared in reading order
- game_enums.py: Centralized enums for factions, terrain types and battle phases
"""

from .data_structures import Vector2, READING_ORDER_OFFSETS
from .game_enums import Faction, TerrainType, BattlePhase, FACTION_NAMES, FACTION_PLURALS, TERRAIN_SYMBOLS

__all__ = [
    "Vector2",
    "READING_ORDER_OFFSETS",
    "Faction",
    "TerrainType",
    "BattlePhase",
    "FACTION_NAMES",
    "FACTION_PLURALS",
    "TERRAIN_SYMBOLS",
]
