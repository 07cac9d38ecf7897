from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..core.data import Faction, TerrainType, Vector2
from .entities.unit import Unit

if TYPE_CHECKING:
    from ..core.config import BattleConfig


class BattlefieldError(Exception):
    """Base exception for battlefield errors."""
    pass


class BattlefieldParseError(BattlefieldError, ValueError):
    """Raised when battlefield text cannot be turned into a grid."""

    def __init__(self, message: str, row: Optional[int] = None, column: Optional[int] = None):
        if row is not None and column is not None:
            message = f"{message} at row {row}, column {column}"
        elif row is not None:
            message = f"{message} at row {row}"
        super().__init__(message)
        self.row = row
        self.column = column


class BattleInvariantError(BattlefieldError):
    """Raised when an operation would break a battlefield invariant.

    The simulator never triggers this on a valid battlefield, so seeing it
    means a defect in the caller, not a recoverable condition.
    """
    pass


WALL_SYMBOL = TerrainType.WALL.symbol
OPEN_SYMBOL = TerrainType.OPEN.symbol


@dataclass
class Battlefield:
    """Grid of walls and open floor plus the units fighting on it.

    Cells are stored in flat arrays indexed by ``row * width + column``, so a
    smaller index always comes first in reading order.
    """
    width: int
    height: int
    terrain: NDArray[np.uint8] = field(init=False)
    occupancy: NDArray[np.int32] = field(init=False)  # Unit indices, -1 for empty
    _units: list[Unit] = field(default_factory=list)
    unit_id_to_index: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise BattlefieldParseError(f"Battlefield must not be empty, got {self.width}x{self.height}")
        size = self.width * self.height
        self.terrain = np.full(size, TerrainType.OPEN.value, dtype=np.uint8)
        self.occupancy = np.full(size, -1, dtype=np.int32)

    @classmethod
    def from_text(cls, text: str, config: Optional["BattleConfig"] = None) -> "Battlefield":
        """Parse a battlefield map.

        Each character is one cell: ``#`` wall, ``.`` open floor, ``G`` goblin
        and ``E`` elf (both standing on open floor). Rows must share a length.
        Units are numbered per faction in reading order (G0, G1, ..., E0, ...).

        Raises:
            BattlefieldParseError: On an unknown character, ragged rows or
                blank input.
        """
        if config is None:
            from ..core.config import BattleConfig
            config = BattleConfig()

        rows = text.splitlines()
        while rows and not rows[-1]:
            rows.pop()
        if not rows:
            raise BattlefieldParseError("Battlefield input is empty")

        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise BattlefieldParseError(
                    f"Battlefield is not rectangular: expected {width} columns, got {len(row)}", row=y
                )

        battlefield = cls(width, len(rows))
        counters = {faction: 0 for faction in Faction}

        for y, row in enumerate(rows):
            for x, symbol in enumerate(row):
                position = Vector2(y, x)
                if symbol == WALL_SYMBOL:
                    battlefield.set_tile(position, TerrainType.WALL)
                elif symbol == OPEN_SYMBOL:
                    continue
                else:
                    try:
                        faction = Faction.from_symbol(symbol)
                    except ValueError:
                        raise BattlefieldParseError(f"Unknown map symbol {symbol!r}", row=y, column=x)
                    unit = Unit(
                        unit_id=f"{faction.symbol}{counters[faction]}",
                        faction=faction,
                        position=position,
                        hp=config.hit_points,
                        attack_power=config.attack_power[faction],
                    )
                    counters[faction] += 1
                    battlefield.add_unit(unit)

        return battlefield

    # ============== Grid Methods ==============

    @property
    def size(self) -> int:
        return self.width * self.height

    def is_valid_position(self, position: Vector2) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def index_of(self, position: Vector2) -> int:
        """Flat arena index of a position. Position must be valid."""
        return position.y * self.width + position.x

    def position_of(self, index: int) -> Vector2:
        y, x = divmod(int(index), self.width)
        return Vector2(y, x)

    def neighbor_indices(self, index: int) -> list[int]:
        """Flat indices of the in-bounds orthogonal neighbours, in reading order."""
        y, x = divmod(int(index), self.width)
        neighbors = []
        if y > 0:
            neighbors.append(index - self.width)
        if x > 0:
            neighbors.append(index - 1)
        if x < self.width - 1:
            neighbors.append(index + 1)
        if y < self.height - 1:
            neighbors.append(index + self.width)
        return neighbors

    def set_tile(self, position: Vector2, terrain_type: TerrainType) -> None:
        """Set terrain at position. Only used while building the grid."""
        if not self.is_valid_position(position):
            raise BattleInvariantError(f"Invalid position: {position}")
        index = self.index_of(position)
        if terrain_type is TerrainType.WALL and self.occupancy[index] >= 0:
            raise BattleInvariantError(f"Cannot wall off occupied cell {position}")
        self.terrain[index] = terrain_type.value

    def get_terrain_type(self, position: Vector2) -> Optional[TerrainType]:
        if not self.is_valid_position(position):
            return None
        return TerrainType(int(self.terrain[self.index_of(position)]))

    def is_wall(self, position: Vector2) -> bool:
        return self.get_terrain_type(position) is TerrainType.WALL

    def is_open(self, position: Vector2) -> bool:
        """Check if position is open floor with nobody standing on it."""
        if not self.is_valid_position(position):
            return False
        index = self.index_of(position)
        return bool(self.terrain[index] == TerrainType.OPEN.value and self.occupancy[index] < 0)

    def get_wall_mask(self) -> NDArray[np.bool_]:
        """Flat boolean mask of wall cells."""
        return self.terrain == TerrainType.WALL.value

    def get_occupied_mask(self) -> NDArray[np.bool_]:
        """Flat boolean mask of cells holding a living unit."""
        return self.occupancy >= 0

    def get_passable_mask(self) -> NDArray[np.bool_]:
        """Flat boolean mask of open, unoccupied cells."""
        return ~self.get_wall_mask() & ~self.get_occupied_mask()

    # ============== Unit Methods ==============

    @property
    def units(self) -> list[Unit]:
        """Living units in storage order."""
        return list(self._units)

    def add_unit(self, unit: Unit) -> None:
        """Place a unit on an open, unoccupied cell."""
        if unit.unit_id in self.unit_id_to_index:
            raise BattleInvariantError(f"Duplicate unit id {unit.unit_id}")
        if not self.is_valid_position(unit.position):
            raise BattleInvariantError(f"Unit {unit.unit_id} placed outside the grid at {unit.position}")
        if self.is_wall(unit.position):
            raise BattleInvariantError(f"Unit {unit.unit_id} placed on a wall at {unit.position}")
        if self.get_unit_at(unit.position) is not None:
            raise BattleInvariantError(f"Unit {unit.unit_id} placed on occupied cell {unit.position}")

        unit_index = len(self._units)
        self._units.append(unit)
        self.unit_id_to_index[unit.unit_id] = unit_index
        self.occupancy[self.index_of(unit.position)] = unit_index

    def remove_unit(self, unit_id: str) -> Unit:
        """Remove unit by ID and clean up all data structures."""
        unit_index = self.unit_id_to_index.get(unit_id)
        if unit_index is None:
            raise BattleInvariantError(f"Cannot remove unknown unit {unit_id}")

        unit = self._units[unit_index]
        self.occupancy[self.index_of(unit.position)] = -1
        del self.unit_id_to_index[unit_id]

        # Compact the list and shift every later index down by one
        self._units.pop(unit_index)
        for uid, idx in self.unit_id_to_index.items():
            if idx > unit_index:
                self.unit_id_to_index[uid] = idx - 1
        self.occupancy[self.occupancy > unit_index] -= 1

        return unit

    def move_unit(self, unit_id: str, position: Vector2) -> Vector2:
        """Move unit to an open cell and return its previous position."""
        unit = self.get_unit(unit_id)
        if unit is None:
            raise BattleInvariantError(f"Cannot move unknown unit {unit_id}")
        if not self.is_open(position):
            raise BattleInvariantError(f"Unit {unit_id} cannot move into {position}")

        old_position = unit.position
        self.occupancy[self.index_of(old_position)] = -1
        unit.position = position
        self.occupancy[self.index_of(position)] = self.unit_id_to_index[unit_id]

        return old_position

    def get_unit(self, unit_id: str) -> Optional[Unit]:
        unit_index = self.unit_id_to_index.get(unit_id)
        if unit_index is None:
            return None
        return self._units[unit_index]

    def get_unit_at(self, position: Vector2) -> Optional[Unit]:
        """Get unit at position using the occupancy array."""
        if not self.is_valid_position(position):
            return None
        unit_index = self.occupancy[self.index_of(position)]
        if unit_index < 0:
            return None
        return self._units[unit_index]

    def units_by_faction(self, faction: Faction) -> list[Unit]:
        return [unit for unit in self._units if unit.faction is faction]

    def count_units(self, faction: Optional[Faction] = None) -> int:
        if faction is None:
            return len(self._units)
        return sum(1 for unit in self._units if unit.faction is faction)

    def units_in_reading_order(self) -> list[Unit]:
        """Living units sorted by position, independent of storage order."""
        return sorted(self._units, key=lambda unit: unit.position)

    def adjacent_enemies(self, unit: Unit) -> list[Unit]:
        """Enemies orthogonally adjacent to unit, in reading order."""
        enemies = []
        for neighbor in unit.position.neighbors():
            other = self.get_unit_at(neighbor)
            if other is not None and unit.is_enemy_of(other):
                enemies.append(other)
        return enemies

    def total_hit_points(self, faction: Optional[Faction] = None) -> int:
        return sum(
            unit.hp for unit in self._units
            if faction is None or unit.faction is faction
        )

    def set_attack_power(self, faction: Faction, power: int) -> None:
        """Boost (or reset) the attack power of every unit of a faction."""
        if power <= 0:
            raise ValueError(f"Attack power must be positive, got {power}")
        for unit in self.units_by_faction(faction):
            unit.attack_power = power

    # ============== Rendering ==============

    def render(self, show_hit_points: bool = True) -> str:
        """Render the battlefield as map text.

        With show_hit_points each row is followed by the hit points of its
        units in reading order, e.g. ``#G.E#   G(200), E(131)``.
        """
        lines = []
        for y in range(self.height):
            symbols = []
            row_units = []
            for x in range(self.width):
                position = Vector2(y, x)
                unit = self.get_unit_at(position)
                if unit is not None:
                    symbols.append(unit.symbol)
                    row_units.append(unit)
                else:
                    symbols.append(self.get_terrain_type(position).symbol)
            line = "".join(symbols)
            if show_hit_points and row_units:
                line += "   " + ", ".join(f"{unit.symbol}({unit.hp})" for unit in row_units)
            lines.append(line)
        return "\n".join(lines)
