"""Tests for the real-time background driver."""

import random
import time

from config.settings import Settings
from nightwatch.core.simulation import Simulation
from nightwatch.core.state import Phase
from nightwatch.utils.threading_utils import NightRunner, run_in_background


def _short_night() -> Simulation:
    settings = Settings()
    settings.night.night_length_minutes = 5
    settings.agents.loss_probability = 0.0
    sim = Simulation(settings=settings, rng=random.Random(0))
    sim.set_speed(10.0)
    return sim


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_background_runner_finishes_night():
    sim = _short_night()
    runner = run_in_background(sim, frame_interval=0.001)
    try:
        assert _wait_for(lambda: sim.get_snapshot().phase is Phase.WON)
    finally:
        runner.shutdown()

    assert not runner.is_running
    assert sim.get_snapshot().elapsed_minutes == 5


def test_exit_to_menu_halts_ticks():
    sim = _short_night()
    sim.settings.night.night_length_minutes = 360
    sim.night_clock.night_length_minutes = 360
    runner = run_in_background(sim, frame_interval=0.001)
    try:
        assert _wait_for(lambda: sim.get_snapshot().elapsed_minutes > 0)
        sim.exit_to_menu()
        time.sleep(0.05)
        snapshot = sim.get_snapshot()
        assert snapshot.phase is Phase.MENU
        assert snapshot.elapsed_minutes == 0
    finally:
        runner.shutdown()


def test_runner_uses_injected_time_source():
    sim = _short_night()
    sim.set_speed(1.0)
    sim.start_night()
    ticks = iter([0.0, 0.1, 0.2, 0.3])
    runner = NightRunner(sim, frame_interval=0.0, time_source=lambda: next(ticks, 0.3))
    runner.start()
    try:
        assert _wait_for(lambda: sim.get_snapshot().elapsed_minutes == 3)
    finally:
        runner.shutdown()
