"""
Battle configuration loaded from YAML.

Example file::

    units:
      hit_points: 200
      attack_power:
        goblin: 3
        elf: 3
    boost:
      min: 4
      max: 200
    log:
      level: info
      max_messages: 1000
      directory: logs

Every section and key is optional; missing values fall back to the defaults
of the dataclasses below.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .data import Faction

DEFAULT_HIT_POINTS = 200
DEFAULT_ATTACK_POWER = 3
LOG_LEVEL_NAMES = ("debug", "info", "warning", "error")


def _default_attack_power() -> dict[Faction, int]:
    return {faction: DEFAULT_ATTACK_POWER for faction in Faction}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return an optional mapping section, empty when absent."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be a mapping, got {type(section).__name__}")
    return section


def _integer(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass
class LogSettings:
    """Settings for the battle log."""
    level: str = "info"
    max_messages: int = 1000
    directory: str = "logs"


@dataclass
class BattleConfig:
    """Unit stats and tool settings for a battle."""
    hit_points: int = DEFAULT_HIT_POINTS
    attack_power: dict[Faction, int] = field(default_factory=_default_attack_power)
    boost_min: Optional[int] = None
    boost_max: Optional[int] = None
    log: LogSettings = field(default_factory=LogSettings)

    def __post_init__(self):
        # Fill factions left out of a partial mapping without touching the caller's dict
        self.attack_power = dict(self.attack_power)
        for faction in Faction:
            self.attack_power.setdefault(faction, DEFAULT_ATTACK_POWER)
        self.validate()

    @property
    def boost_range(self) -> range:
        """Elf attack powers tried by the boost search, in ascending order."""
        low = self.boost_min if self.boost_min is not None else self.attack_power[Faction.ELF] + 1
        high = self.boost_max if self.boost_max is not None else self.hit_points
        return range(low, high + 1)

    def validate(self) -> None:
        """Raise ValueError describing the first invalid setting."""
        if self.hit_points <= 0:
            raise ValueError(f"hit_points must be positive, got {self.hit_points}")
        for faction, power in self.attack_power.items():
            if power <= 0:
                raise ValueError(f"attack power for {faction.name.lower()} must be positive, got {power}")
        if self.boost_min is not None and self.boost_min <= 0:
            raise ValueError(f"boost min must be positive, got {self.boost_min}")
        if self.boost_max is not None and self.boost_max <= 0:
            raise ValueError(f"boost max must be positive, got {self.boost_max}")
        if self.boost_min is not None and self.boost_max is not None and self.boost_min > self.boost_max:
            raise ValueError(f"boost min {self.boost_min} exceeds boost max {self.boost_max}")
        if self.log.level.lower() not in LOG_LEVEL_NAMES:
            raise ValueError(f"Unknown log level {self.log.level!r}")
        if self.log.max_messages <= 0:
            raise ValueError(f"log max_messages must be positive, got {self.log.max_messages}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BattleConfig":
        """Build a config from the parsed YAML mapping."""
        units = _section(data, "units")
        boost = _section(data, "boost")
        log = _section(data, "log")

        attack_power: dict[Faction, int] = {}
        for name, power in _section(units, "attack_power").items():
            try:
                faction = Faction[str(name).upper()]
            except KeyError:
                raise ValueError(f"Unknown faction in attack_power: {name!r}")
            attack_power[faction] = _integer(power, f"attack power for {name}")

        return cls(
            hit_points=_integer(units.get("hit_points", DEFAULT_HIT_POINTS), "hit_points"),
            attack_power=attack_power,
            boost_min=_integer(boost["min"], "boost min") if "min" in boost else None,
            boost_max=_integer(boost["max"], "boost max") if "max" in boost else None,
            log=LogSettings(
                level=str(log.get("level", "info")),
                max_messages=_integer(log.get("max_messages", 1000), "log max_messages"),
                directory=str(log.get("directory", "logs")),
            ),
        )


def load_config(config_path: Optional[Union[str, Path]] = None) -> BattleConfig:
    """Load a battle configuration file.

    Args:
        config_path: Path to a YAML file, or None for the defaults

    Returns:
        The parsed and validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML is malformed or a value is invalid
    """
    if config_path is None:
        return BattleConfig()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

    return BattleConfig.from_dict(data)
