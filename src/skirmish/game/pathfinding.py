"""Breadth-first movement search over the battlefield arena.

Every step costs one, so a plain BFS gives shortest distances. Searches run
directly on the flat grid arrays and check walls and occupancy inline; units
block movement except the one that is searching.
"""

from collections import deque
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..core.data import Vector2
from .battlefield import Battlefield
from .entities.unit import Unit

UNREACHABLE = -1


def distance_field(battlefield: Battlefield, origin: Vector2) -> NDArray[np.int32]:
    """BFS distances from origin to every reachable open, unoccupied cell.

    The origin itself is treated as passable even when a unit stands on it.

    Returns:
        Flat array of distances, UNREACHABLE for cells that cannot be reached
    """
    passable = battlefield.get_passable_mask()
    distances = np.full(battlefield.size, UNREACHABLE, dtype=np.int32)

    start = battlefield.index_of(origin)
    distances[start] = 0
    queue = deque([start])

    while queue:
        index = queue.popleft()
        next_distance = distances[index] + 1
        for neighbor in battlefield.neighbor_indices(index):
            if passable[neighbor] and distances[neighbor] == UNREACHABLE:
                distances[neighbor] = next_distance
                queue.append(neighbor)

    return distances


def target_squares(battlefield: Battlefield, unit: Unit) -> list[Vector2]:
    """Open, unoccupied cells next to any living enemy, in reading order."""
    squares = set()
    for enemy in battlefield.units_by_faction(unit.faction.enemy):
        for neighbor in enemy.position.neighbors():
            if battlefield.is_open(neighbor):
                squares.add(neighbor)
    return sorted(squares)


def choose_destination(battlefield: Battlefield, unit: Unit) -> Optional[Vector2]:
    """Pick the nearest reachable target square.

    Ties on distance go to the square that comes first in reading order.
    Returns None when no target square can be reached.
    """
    squares = target_squares(battlefield, unit)
    if not squares:
        return None

    distances = distance_field(battlefield, unit.position)
    best: Optional[tuple[int, Vector2]] = None
    for square in squares:
        distance = int(distances[battlefield.index_of(square)])
        if distance == UNREACHABLE:
            continue
        if best is None or (distance, square) < best:
            best = (distance, square)

    return best[1] if best is not None else None


def choose_step(battlefield: Battlefield, unit: Unit, destination: Vector2) -> Optional[Vector2]:
    """Pick the first step of a shortest path from unit to destination.

    Distances are measured backwards from the destination; of the unit's
    open neighbours, the one closest to the destination wins, ties going to
    reading order.
    """
    distances = distance_field(battlefield, destination)
    best: Optional[tuple[int, int]] = None
    for neighbor in battlefield.neighbor_indices(battlefield.index_of(unit.position)):
        distance = int(distances[neighbor])
        if distance == UNREACHABLE:
            continue
        # Flat index order is reading order
        if best is None or (distance, neighbor) < best:
            best = (distance, neighbor)

    return battlefield.position_of(best[1]) if best is not None else None
