"""Shared fixtures: hand-placed worlds and components wired to them."""

import numpy as np
import pytest

from saverbot.agent.energy import EnergyGovernor
from saverbot.agent.forager import Forager
from saverbot.agent.memory import SpatialMemory
from saverbot.agent.navigator import Navigator
from saverbot.config import SaverConfig
from saverbot.world.grid import SaverWorld


@pytest.fixture
def world():
    """Empty 20x20 world with the agent at (5, 5) and full energy."""
    return SaverWorld.empty(size=20, pos=(5, 5))


@pytest.fixture
def memory():
    return SpatialMemory()


@pytest.fixture
def governor(world):
    return EnergyGovernor(SaverConfig().energy_thresholds, world)


@pytest.fixture
def navigator(world, governor):
    return Navigator(world, governor)


@pytest.fixture
def forager(world, memory, governor):
    return Forager(world, memory, governor)


@pytest.fixture
def rng():
    return np.random.RandomState(0)
