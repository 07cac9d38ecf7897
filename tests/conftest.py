"""
Basic test fixtures for the skirmish test suite.

Provides battlefields, configs and the published reference battles.
"""

import sys
import os
import pytest

# Add the project root and source directory to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)
sys.path.insert(0, os.path.join(project_root, "src"))

from skirmish.core.config import BattleConfig
from skirmish.core.events import EventManager
from skirmish.game.battlefield import Battlefield

from tests.battle_maps import DUEL_MAP, EXAMPLE_MAP, MOVEMENT_MAP


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def default_config():
    return BattleConfig()


@pytest.fixture
def duel_battlefield():
    """One goblin and one elf standing side by side."""
    return Battlefield.from_text(DUEL_MAP)


@pytest.fixture
def movement_battlefield():
    return Battlefield.from_text(MOVEMENT_MAP)


@pytest.fixture
def example_battlefield():
    return Battlefield.from_text(EXAMPLE_MAP)
