"""Battle unit.

A unit belongs to exactly one faction. Its identity (unit_id) is stable for
the whole battle while its position and hit points change turn by turn.
Movement must go through Battlefield.move_unit so occupancy stays in sync.
"""

from dataclasses import dataclass

from ...core.data import Faction, Vector2, FACTION_NAMES


@dataclass(eq=False)
class Unit:
    """A goblin or an elf on the battlefield.

    Units compare by identity: two units with equal stats on equal cells are
    still different units.
    """
    unit_id: str
    faction: Faction
    position: Vector2
    hp: int
    attack_power: int

    @property
    def name(self) -> str:
        """Display name, e.g. "Goblin G3"."""
        return f"{FACTION_NAMES[self.faction]} {self.unit_id}"

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def symbol(self) -> str:
        return self.faction.symbol

    def is_enemy_of(self, other: "Unit") -> bool:
        """Check whether other belongs to the hostile faction."""
        return other.faction is self.faction.enemy

    def take_damage(self, amount: int) -> bool:
        """Apply damage and report whether the unit was defeated.

        Hit points may go negative; a unit at or below zero is defeated.
        """
        self.hp -= amount
        return not self.is_alive

    def __repr__(self) -> str:
        return f"Unit({self.unit_id}, {self.faction.name}, {self.position}, hp={self.hp})"
