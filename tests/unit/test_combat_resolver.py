"""
Unit tests for the CombatResolver class.

Tests target selection, damage application and removal of defeated units.
"""
from unittest.mock import Mock

from skirmish.core.data import Vector2
from skirmish.core.events import EventType
from skirmish.game.battlefield import Battlefield
from skirmish.game.combat_resolver import CombatResolver

SURROUNDED_MAP = """\
#####
#.G.#
#.EG#
#.G.#
#####
"""


def _surrounded():
    """Elf at (2, 2) with goblins above, right and below."""
    battlefield = Battlefield.from_text(SURROUNDED_MAP)
    return battlefield, battlefield.get_unit("E0")


class TestSelectTarget:
    """Test choosing which adjacent enemy to hit."""

    def test_fewest_hit_points_wins(self):
        battlefield, elf = _surrounded()
        battlefield.get_unit_at(Vector2(3, 2)).hp = 50

        target = CombatResolver(battlefield).select_target(elf)

        assert target.position == Vector2(3, 2)

    def test_hit_point_tie_goes_to_reading_order(self):
        battlefield, elf = _surrounded()
        battlefield.get_unit_at(Vector2(1, 2)).hp = 4
        battlefield.get_unit_at(Vector2(2, 3)).hp = 2
        battlefield.get_unit_at(Vector2(3, 2)).hp = 2

        target = CombatResolver(battlefield).select_target(elf)

        assert target.position == Vector2(2, 3)

    def test_full_health_tie_picks_topmost(self):
        battlefield, elf = _surrounded()

        target = CombatResolver(battlefield).select_target(elf)

        assert target.position == Vector2(1, 2)

    def test_no_adjacent_enemy(self):
        battlefield = Battlefield.from_text("#######\n#E...G#\n#######")

        resolver = CombatResolver(battlefield)

        assert resolver.select_target(battlefield.get_unit("E0")) is None
        assert resolver.attack(battlefield.get_unit("E0")) is None


class TestAttack:
    """Test damage application."""

    def test_attack_applies_attack_power(self):
        battlefield, elf = _surrounded()
        elf.attack_power = 10

        result = CombatResolver(battlefield).attack(elf)

        assert result.damage == 10
        assert result.target.hp == 190
        assert not result.defeated
        assert battlefield.count_units() == 4

    def test_defeated_target_is_removed(self):
        battlefield, elf = _surrounded()
        weak = battlefield.get_unit_at(Vector2(2, 3))
        weak.hp = 3

        result = CombatResolver(battlefield).attack(elf)

        assert result.target is weak
        assert result.defeated
        assert weak.hp == 0
        assert battlefield.get_unit(weak.unit_id) is None
        assert battlefield.get_unit_at(Vector2(2, 3)) is None

    def test_overkill_is_defeat(self):
        battlefield, elf = _surrounded()
        battlefield.get_unit_at(Vector2(1, 2)).hp = 1

        result = CombatResolver(battlefield).attack(elf)

        assert result.defeated
        assert result.target.hp == -2

    def test_events_published(self, event_manager):
        battlefield, elf = _surrounded()
        battlefield.get_unit_at(Vector2(1, 2)).hp = 3
        attacked, defeated = Mock(), Mock()
        event_manager.subscribe(EventType.UNIT_ATTACKED, attacked)
        event_manager.subscribe(EventType.UNIT_DEFEATED, defeated)

        resolver = CombatResolver(battlefield, event_manager)
        resolver.round_number = 4
        resolver.attack(elf)
        event_manager.process_events()

        attack_event = attacked.call_args[0][0]
        defeat_event = defeated.call_args[0][0]
        assert attack_event.attacker is elf
        assert attack_event.damage == 3
        assert attack_event.target_hp == 0
        assert attack_event.round_number == 4
        assert defeat_event.defeated_by is elf
        assert defeat_event.unit.position == Vector2(1, 2)
