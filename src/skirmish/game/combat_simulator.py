"""
Round-based combat simulation between goblins and elves.

A round gives every unit alive at its start one turn, in reading order of the
positions the units held when the round began. A turn is:

1. End the battle if the unit has no enemies left (the round is not counted).
2. Attack an adjacent enemy if there is one.
3. Otherwise step once toward the nearest reachable target square, then
   attack if an enemy is now adjacent.

Each call to advance_round() reports the battle state, so callers drive the
battle without any hidden counters.
"""
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.data import BattlePhase, Faction
from ..core.events import BattleResolved, RoundCompleted, RoundStarted, UnitMoved
from .battlefield import Battlefield, BattlefieldError, BattleInvariantError
from .combat_resolver import CombatResolver
from .entities.unit import Unit
from .pathfinding import choose_destination, choose_step

if TYPE_CHECKING:
    from ..core.config import BattleConfig
    from ..core.events import EventManager


class BattleStalemateError(BattlefieldError):
    """Raised when a full round passes without any unit moving or attacking.

    The board would repeat forever, so the battle can never resolve.
    """

    def __init__(self, completed_rounds: int):
        super().__init__(f"Battle stalled after {completed_rounds} rounds: no unit can reach an enemy")
        self.completed_rounds = completed_rounds


@dataclass(frozen=True)
class BattleState:
    """Snapshot returned by every round advance."""
    phase: BattlePhase
    completed_rounds: int
    winner: Optional[Faction] = None

    @property
    def is_resolved(self) -> bool:
        return self.phase is BattlePhase.RESOLVED


@dataclass(frozen=True)
class BattleOutcome:
    """Final result of a resolved battle."""
    winner: Optional[Faction]
    completed_rounds: int
    remaining_hit_points: int
    casualties: dict[Faction, int] = field(default_factory=dict)

    @property
    def score(self) -> int:
        """Completed rounds times the hit points left on the field."""
        return self.completed_rounds * self.remaining_hit_points

    def losses(self, faction: Faction) -> int:
        return self.casualties.get(faction, 0)


class CombatSimulator:
    """Advances a battlefield round by round until one faction is gone."""

    def __init__(self, battlefield: Battlefield, event_manager: Optional["EventManager"] = None):
        self.battlefield = battlefield
        self.event_manager = event_manager
        self.resolver = CombatResolver(battlefield, event_manager)
        self.state = BattleState(BattlePhase.RUNNING, 0)
        self._initial_counts = {faction: battlefield.count_units(faction) for faction in Faction}
        self._actions_this_round = 0

    @property
    def completed_rounds(self) -> int:
        return self.state.completed_rounds

    def advance_round(self) -> BattleState:
        """Play one full round, or resolve the battle partway through it."""
        if self.state.is_resolved:
            return self.state

        if any(self.battlefield.count_units(faction) == 0 for faction in Faction):
            return self._resolve()

        round_number = self.completed_rounds + 1
        self.resolver.round_number = round_number
        self._actions_this_round = 0

        # Order is fixed before anyone moves
        turn_order = self.battlefield.units_in_reading_order()
        self._publish(RoundStarted(round_number=round_number, unit_count=len(turn_order)))

        for unit in turn_order:
            if self.battlefield.get_unit(unit.unit_id) is not unit:
                # Defeated earlier this round
                continue
            if not self.take_turn(unit):
                return self._resolve()

        self.state = BattleState(BattlePhase.RUNNING, round_number)
        self._publish(RoundCompleted(
            round_number=round_number,
            remaining_hit_points=self.battlefield.total_hit_points(),
        ))
        self._flush_events()
        return self.state

    def take_turn(self, unit: Unit) -> bool:
        """Play a single unit's turn.

        Returns:
            False if the unit found no enemies at all, which ends the battle
        """
        if self.battlefield.count_units(unit.faction.enemy) == 0:
            return False

        if self.resolver.attack(unit) is not None:
            self._actions_this_round += 1
            return True

        destination = choose_destination(self.battlefield, unit)
        if destination is None:
            return True

        step = choose_step(self.battlefield, unit, destination)
        if step is None:
            raise BattleInvariantError(
                f"{unit.unit_id} reached {destination} by search but has no first step"
            )

        from_position = self.battlefield.move_unit(unit.unit_id, step)
        self._actions_this_round += 1
        self._publish(UnitMoved(
            round_number=self.resolver.round_number,
            unit=unit,
            from_position=from_position,
        ))

        self.resolver.attack(unit)
        return True

    def run(self) -> BattleOutcome:
        """Advance rounds until the battle resolves.

        Raises:
            BattleStalemateError: If a round passes with no movement or attack
                while both factions still stand
        """
        while not self.state.is_resolved:
            state = self.advance_round()
            if not state.is_resolved and self._actions_this_round == 0:
                raise BattleStalemateError(state.completed_rounds)
        return self.outcome()

    def outcome(self) -> BattleOutcome:
        """Summarize the battle as it stands."""
        casualties = {
            faction: self._initial_counts[faction] - self.battlefield.count_units(faction)
            for faction in Faction
        }
        return BattleOutcome(
            winner=self.state.winner,
            completed_rounds=self.completed_rounds,
            remaining_hit_points=self.battlefield.total_hit_points(),
            casualties=casualties,
        )

    def _resolve(self) -> BattleState:
        survivors = [faction for faction in Faction if self.battlefield.count_units(faction) > 0]
        winner = survivors[0] if len(survivors) == 1 else None
        self.state = BattleState(BattlePhase.RESOLVED, self.completed_rounds, winner)
        self._publish(BattleResolved(
            round_number=self.completed_rounds,
            winner=winner,
            completed_rounds=self.completed_rounds,
            remaining_hit_points=self.battlefield.total_hit_points(),
        ))
        self._flush_events()
        return self.state

    def _publish(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="CombatSimulator")

    def _flush_events(self) -> None:
        if self.event_manager is not None:
            self.event_manager.process_events()


def simulate(
    text: str,
    config: Optional["BattleConfig"] = None,
    event_manager: Optional["EventManager"] = None,
) -> int:
    """Parse a battlefield, fight the battle and return its score."""
    battlefield = Battlefield.from_text(text, config)
    return CombatSimulator(battlefield, event_manager).run().score
