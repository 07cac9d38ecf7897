"""
Unit tests for breadth-first movement search.
"""
from skirmish.core.data import Vector2
from skirmish.game.battlefield import Battlefield
from skirmish.game.pathfinding import (
    UNREACHABLE,
    choose_destination,
    choose_step,
    distance_field,
    target_squares,
)

TARGETS_MAP = """\
#######
#E..G.#
#...#.#
#.G.#G#
#######
"""

STEP_TIE_MAP = """\
#######
#.E...#
#.....#
#...G.#
#######
"""

CORRIDOR_MAP = """\
###########
#G...E...G#
###########
"""

SEALED_MAP = """\
#######
#E.#.G#
#######
"""


def _elf(battlefield: Battlefield):
    return battlefield.get_unit("E0")


class TestDistanceField:
    """Test BFS distances."""

    def test_origin_is_zero_even_when_occupied(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)
        distances = distance_field(battlefield, Vector2(1, 1))

        assert distances[battlefield.index_of(Vector2(1, 1))] == 0

    def test_distances_go_around_walls(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)
        distances = distance_field(battlefield, Vector2(1, 1))

        assert distances[battlefield.index_of(Vector2(1, 3))] == 2
        assert distances[battlefield.index_of(Vector2(2, 2))] == 2
        assert distances[battlefield.index_of(Vector2(3, 3))] == 4

    def test_units_block_movement(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)
        distances = distance_field(battlefield, Vector2(1, 1))

        # Only reachable through the goblins at (1, 4) and (3, 5)
        assert distances[battlefield.index_of(Vector2(1, 5))] == UNREACHABLE
        assert distances[battlefield.index_of(Vector2(2, 5))] == UNREACHABLE
        # Occupied and wall cells are never assigned a distance
        assert distances[battlefield.index_of(Vector2(3, 2))] == UNREACHABLE
        assert distances[battlefield.index_of(Vector2(0, 0))] == UNREACHABLE


class TestTargetSquares:
    """Test collection of cells next to enemies."""

    def test_open_cells_next_to_enemies(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)

        assert target_squares(battlefield, _elf(battlefield)) == [
            Vector2(1, 3), Vector2(1, 5), Vector2(2, 2),
            Vector2(2, 5), Vector2(3, 1), Vector2(3, 3),
        ]

    def test_no_enemies(self):
        battlefield = Battlefield.from_text("#####\n#E.E#\n#####")

        assert target_squares(battlefield, _elf(battlefield)) == []


class TestChooseDestination:
    """Test nearest target selection and its reading order tie-break."""

    def test_nearest_reachable_in_reading_order(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)

        # (1, 3), (2, 2) and (3, 1) are all two steps away
        assert choose_destination(battlefield, _elf(battlefield)) == Vector2(1, 3)

    def test_equal_distance_targets_on_both_sides(self):
        battlefield = Battlefield.from_text(CORRIDOR_MAP)

        assert choose_destination(battlefield, _elf(battlefield)) == Vector2(1, 2)

    def test_equal_distance_targets_on_different_rows(self):
        battlefield = Battlefield.from_text(STEP_TIE_MAP)

        # (2, 4) and (3, 3) are both three steps away
        assert choose_destination(battlefield, _elf(battlefield)) == Vector2(2, 4)

    def test_unreachable(self):
        battlefield = Battlefield.from_text(SEALED_MAP)

        assert choose_destination(battlefield, _elf(battlefield)) is None


class TestChooseStep:
    """Test first step selection and its reading order tie-break."""

    def test_step_toward_destination(self):
        battlefield = Battlefield.from_text(TARGETS_MAP)
        elf = _elf(battlefield)

        assert choose_step(battlefield, elf, Vector2(1, 3)) == Vector2(1, 2)

    def test_equal_length_paths_prefer_reading_order(self):
        battlefield = Battlefield.from_text(STEP_TIE_MAP)
        elf = _elf(battlefield)

        # Right (1, 3) and down (2, 2) are both two steps from (2, 4)
        assert choose_step(battlefield, elf, Vector2(2, 4)) == Vector2(1, 3)

    def test_step_onto_destination(self):
        battlefield = Battlefield.from_text(CORRIDOR_MAP)
        elf = _elf(battlefield)

        assert choose_step(battlefield, elf, Vector2(1, 4)) == Vector2(1, 4)

    def test_corridor_step(self):
        battlefield = Battlefield.from_text(CORRIDOR_MAP)
        elf = _elf(battlefield)

        destination = choose_destination(battlefield, elf)

        assert choose_step(battlefield, elf, destination) == Vector2(1, 4)
