#!/usr/bin/env python3
"""Command line entry point: fight a battle read from a map file."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .core.config import load_config
from .core.data import FACTION_PLURALS, Faction
from .core.events import EventManager
from .game.battlefield import Battlefield, BattlefieldError
from .game.combat_simulator import CombatSimulator
from .game.elf_boost import find_minimum_boost
from .game.log_manager import LogLevel, LogManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Simulate a goblin versus elf battle and print its score",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skirmish map.txt                  # Print completed rounds x remaining hit points
  skirmish map.txt --render         # Also print the final battlefield
  skirmish map.txt --boost          # Also find the weakest flawless elf attack power
  skirmish map.txt --debug --log-dir logs
  skirmish map.txt --log-dir        # Save the log into the configured directory
        """
    )
    parser.add_argument("input", help="Battlefield map file")
    parser.add_argument("--config", help="YAML battle configuration")
    parser.add_argument(
        "--boost",
        action="store_true",
        help="Search the lowest elf attack power that wins with no elf losses"
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Print the battlefield after the battle"
    )
    parser.add_argument(
        "--log-dir",
        nargs="?",
        const="",
        help="Save the battle log into this directory (the configured one if no value is given)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print every move and attack"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        text = Path(args.input).read_text(encoding="utf-8")
        battlefield = Battlefield.from_text(text, config)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    event_manager = EventManager()
    level = LogLevel.DEBUG if args.debug else LogLevel[config.log.level.upper()]
    log_manager = LogManager(event_manager, max_messages=config.log.max_messages, default_level=level)
    log_manager.system(f"Loaded {args.input}: {battlefield.width}x{battlefield.height}, {battlefield.count_units()} units")
    log_manager.debug(f"Config: {args.config or 'built-in defaults'}, elf attack {config.attack_power[Faction.ELF]}")

    try:
        outcome = CombatSimulator(battlefield, event_manager).run()
        boost = find_minimum_boost(text, config, event_manager) if args.boost else None
    except BattlefieldError as e:
        log_manager.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if args.log_dir is not None:
            log_manager.save_log_to_file(args.log_dir or config.log.directory)

    for message in log_manager.get_messages():
        print(message.format())

    if args.render:
        print(battlefield.render())

    winner = FACTION_PLURALS[outcome.winner] if outcome.winner is not None else "Nobody"
    print(f"{winner} win: {outcome.completed_rounds} rounds x {outcome.remaining_hit_points} hp")
    print(outcome.score)

    if args.boost:
        if boost is None:
            print("No elf attack power in range wins without losses")
        else:
            print(f"Elf attack power {boost.attack_power}: {boost.outcome.completed_rounds} rounds "
                  f"x {boost.outcome.remaining_hit_points} hp")
            print(boost.score)

    return 0


if __name__ == "__main__":
    sys.exit(main())
