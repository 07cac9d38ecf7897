"""
Search for the smallest elf attack boost that wins without losses.

Outcomes are not monotonic in attack power (a stronger elf can kill a goblin
sooner and open a path that gets another elf killed), so powers are tried
one by one in ascending order on a fresh battlefield each time.
"""
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ..core.data import Faction
from ..core.events import LogMessage
from .battlefield import Battlefield
from .combat_simulator import BattleOutcome, BattleStalemateError, CombatSimulator

if TYPE_CHECKING:
    from ..core.config import BattleConfig
    from ..core.events import EventManager


@dataclass(frozen=True)
class BoostResult:
    """The winning attack power and the battle it produced."""
    attack_power: int
    outcome: BattleOutcome
    attempts: int

    @property
    def score(self) -> int:
        return self.outcome.score


def is_flawless_elf_victory(outcome: BattleOutcome) -> bool:
    return outcome.winner is Faction.ELF and outcome.losses(Faction.ELF) == 0


def find_minimum_boost(
    text: str,
    config: Optional["BattleConfig"] = None,
    event_manager: Optional["EventManager"] = None,
) -> Optional[BoostResult]:
    """Find the lowest elf attack power that wins with zero elf casualties.

    Args:
        text: Battlefield map text
        config: Battle configuration; its boost range bounds the search
        event_manager: Receives a log message per attempt. Battles fought
            during the search do not publish their own events.

    Returns:
        The first flawless result, or None if no power in range achieves one
        Powers whose battle stalls count as attempts and are skipped.
    """
    if config is None:
        from ..core.config import BattleConfig
        config = BattleConfig()

    attempts = 0
    for power in config.boost_range:
        attempts += 1
        battlefield = Battlefield.from_text(text, config)
        battlefield.set_attack_power(Faction.ELF, power)
        try:
            outcome = CombatSimulator(battlefield).run()
        except BattleStalemateError as e:
            # A stalled battle is never a victory; try the next power
            _log_attempt(event_manager, e.completed_rounds, f"Elf attack {power}: {e}")
            continue

        _log_attempt(
            event_manager,
            outcome.completed_rounds,
            f"Elf attack {power}: {outcome.losses(Faction.ELF)} elf losses, score {outcome.score}",
        )
        if is_flawless_elf_victory(outcome):
            return BoostResult(attack_power=power, outcome=outcome, attempts=attempts)

    return None


def _log_attempt(event_manager: Optional["EventManager"], round_number: int, message: str) -> None:
    if event_manager is None:
        return
    event_manager.publish(
        LogMessage(round_number=round_number, message=message, category="boost"),
        source="ElfBoost",
    )
    event_manager.process_events()
