"""Core building blocks shared by the battle simulation.

- data/: positions and enums
- events/: event bus and battle events
- config.py: YAML battle configuration
"""

from .config import BattleConfig, LogSettings, load_config

__all__ = [
    "BattleConfig",
    "LogSettings",
    "load_config",
]
