"""
Combat resolution for melee attacks between adjacent units.

This module picks the target of an attack, applies damage and removes
defeated units from the battlefield, separate from movement and turn order.
"""
from typing import TYPE_CHECKING, Optional

from ..core.events import UnitAttacked, UnitDefeated

if TYPE_CHECKING:
    from .battlefield import Battlefield
    from .entities.unit import Unit
    from ..core.events import EventManager


class CombatResult:
    """Result of a single attack."""

    def __init__(self, attacker: "Unit", target: "Unit", damage: int, defeated: bool):
        self.attacker = attacker
        self.target = target
        self.damage = damage
        self.defeated = defeated

    def __repr__(self) -> str:
        outcome = "defeated" if self.defeated else f"hp={self.target.hp}"
        return f"CombatResult({self.attacker.unit_id} -> {self.target.unit_id}, {self.damage}, {outcome})"


class CombatResolver:
    """Handles target selection and damage application."""

    def __init__(self, battlefield: "Battlefield", event_manager: Optional["EventManager"] = None):
        self.battlefield = battlefield
        self.event_manager = event_manager
        self.round_number = 0

    def select_target(self, attacker: "Unit") -> Optional["Unit"]:
        """Choose which adjacent enemy to attack.

        The enemy with the fewest hit points is chosen; ties go to the enemy
        that comes first in reading order.
        """
        enemies = self.battlefield.adjacent_enemies(attacker)
        if not enemies:
            return None
        return min(enemies, key=lambda enemy: (enemy.hp, enemy.position))

    def attack(self, attacker: "Unit") -> Optional[CombatResult]:
        """Attack the selected adjacent enemy, if any.

        Returns:
            The result of the attack, or None if no enemy is in range
        """
        target = self.select_target(attacker)
        if target is None:
            return None

        damage = attacker.attack_power
        defeated = target.take_damage(damage)
        self._publish(UnitAttacked(
            round_number=self.round_number,
            attacker=attacker,
            target=target,
            damage=damage,
            target_hp=target.hp,
        ))

        if defeated:
            self.battlefield.remove_unit(target.unit_id)
            self._publish(UnitDefeated(
                round_number=self.round_number,
                unit=target,
                defeated_by=attacker,
            ))

        return CombatResult(attacker, target, damage, defeated)

    def _publish(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="CombatResolver")
