"""Centralized battle enums and constants.

This module contains the enums shared across the simulator: the two hostile
factions, the terrain a grid cell can hold and the phases of a battle.
"""

from enum import Enum, auto


class Faction(Enum):
    """The two mutually hostile unit groups.

    Each variant carries its map symbol, so parsing and rendering never need
    to branch on "is this an elf".
    """
    GOBLIN = "G"
    ELF = "E"

    @property
    def symbol(self) -> str:
        """Character used for this faction on the battlefield map."""
        return self.value

    @property
    def enemy(self) -> "Faction":
        """The faction this one fights against."""
        return Faction.ELF if self is Faction.GOBLIN else Faction.GOBLIN

    @classmethod
    def from_symbol(cls, symbol: str) -> "Faction":
        """Look up a faction by its map symbol."""
        return cls(symbol)


class TerrainType(Enum):
    """Terrain of a grid cell. Fixed at setup."""
    OPEN = 0
    WALL = 1

    @property
    def symbol(self) -> str:
        return TERRAIN_SYMBOLS[self]


class BattlePhase(Enum):
    """Phases of a battle as reported by each round advance."""
    RUNNING = auto()
    RESOLVED = auto()


TERRAIN_SYMBOLS = {
    TerrainType.OPEN: ".",
    TerrainType.WALL: "#",
}

FACTION_NAMES = {
    Faction.GOBLIN: "Goblin",
    Faction.ELF: "Elf",
}

FACTION_PLURALS = {
    Faction.GOBLIN: "Goblins",
    Faction.ELF: "Elves",
}
