"""Spatial data structures.

Positions are stored row-first so that comparing them directly yields
reading order (top to bottom, then left to right), which is the tie-break
used everywhere in the simulator.
"""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vector2:
    """2D grid position.

    Uses (y, x) ordering for direct alignment with 2D array access patterns.
    First parameter is row (y-coordinate), second is column (x-coordinate).
    Instances compare in reading order.
    """
    y: int
    x: int

    def __add__(self, other: "Vector2") -> "Vector2":
        """Vector addition."""
        return Vector2(self.y + other.y, self.x + other.x)

    def __sub__(self, other: "Vector2") -> "Vector2":
        """Vector subtraction."""
        return Vector2(self.y - other.y, self.x - other.x)

    def __lt__(self, other: "Vector2") -> bool:
        """Reading order comparison."""
        if not isinstance(other, Vector2):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def __le__(self, other: "Vector2") -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return (self.y, self.x) <= (other.y, other.x)

    def __gt__(self, other: "Vector2") -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return (self.y, self.x) > (other.y, other.x)

    def __ge__(self, other: "Vector2") -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return (self.y, self.x) >= (other.y, other.x)

    def __iter__(self):
        """Make Vector2 iterable for unpacking (y, x order)."""
        yield self.y
        yield self.x

    def __repr__(self) -> str:
        return f"Vector2({self.y}, {self.x})"

    def manhattan_distance_to(self, other: "Vector2") -> int:
        """Calculate Manhattan distance to another vector."""
        return abs(self.y - other.y) + abs(self.x - other.x)

    def neighbors(self) -> Iterator["Vector2"]:
        """Yield the four orthogonal neighbours in reading order.

        Neighbours may lie outside the grid; callers filter with the
        battlefield's bounds check.
        """
        for offset in READING_ORDER_OFFSETS:
            yield self + offset

    @classmethod
    def from_tuple(cls, coords: tuple[int, int]) -> "Vector2":
        """Create Vector2 from coordinate tuple (y, x order)."""
        return cls(coords[0], coords[1])

    def to_tuple(self) -> tuple[int, int]:
        """Convert to coordinate tuple (y, x order)."""
        return (self.y, self.x)


# Up, left, right, down
READING_ORDER_OFFSETS = (
    Vector2(-1, 0),
    Vector2(0, -1),
    Vector2(0, 1),
    Vector2(1, 0),
)
