"""Pytest configuration and fixtures for nightwatch tests."""

import random
from typing import Iterable

import pytest

from config.settings import Settings
from nightwatch.core.simulation import Simulation
from nightwatch.entities.location import LocationGraph


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandom(random.Random):
    """Random source replaying a fixed sequence of random() values."""

    def __init__(self, values: Iterable[float]) -> None:
        super().__init__(0)
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


class ExplodingRandom(random.Random):
    """Random source that fails the test if it is consulted."""

    def random(self) -> float:
        raise AssertionError("random source should not be consulted")

    def choice(self, seq):
        raise AssertionError("random source should not be consulted")


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def settings():
    """Default settings, independent of any YAML on disk."""
    return Settings()


@pytest.fixture
def graph():
    return LocationGraph.create_default()


@pytest.fixture
def sim(settings, graph, seeded_rng):
    """A fresh simulation sitting at the menu."""
    return Simulation(settings=settings, graph=graph, rng=seeded_rng)


@pytest.fixture
def running_sim(sim):
    """A simulation with night one started."""
    sim.start_night()
    return sim


@pytest.fixture
def safe_settings():
    """Settings where breaches never turn into a loss."""
    s = Settings()
    s.agents.loss_probability = 0.0
    return s
